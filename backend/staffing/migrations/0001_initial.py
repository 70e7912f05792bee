# Initial migration for staffing app
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion

class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Member',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('first_name', models.CharField(max_length=80)),
                ('last_name', models.CharField(db_index=True, max_length=80)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('phone', models.CharField(blank=True, max_length=30, null=True)),
                ('department', models.CharField(blank=True, max_length=80, null=True)),
                ('role', models.CharField(choices=[('ADMIN', 'Administrateur'), ('USER', 'Intervenant')], db_index=True, default='USER', max_length=10)),
                ('active', models.BooleanField(db_index=True, default=True)),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='member', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Intervenant',
                'verbose_name_plural': 'Intervenants',
                'ordering': ['last_name', 'first_name'],
                'indexes': [models.Index(fields=['role', 'active'], name='member_role_active_idx')],
            },
        ),
        migrations.CreateModel(
            name='Service',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=120)),
                ('description', models.TextField(blank=True, null=True)),
                ('date', models.DateField(db_index=True)),
                ('time', models.TimeField()),
                ('location', models.CharField(blank=True, default='', max_length=120)),
                ('status', models.CharField(choices=[('scheduled', 'Programmé'), ('cancelled', 'Annulé'), ('completed', 'Terminé')], db_index=True, default='scheduled', max_length=12)),
            ],
            options={
                'verbose_name': 'Service',
                'verbose_name_plural': 'Services',
                'ordering': ['date', 'time'],
                'indexes': [models.Index(fields=['date', 'time'], name='service_date_time_idx')],
            },
        ),
        migrations.CreateModel(
            name='ServiceAssignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(max_length=80)),
                ('status', models.CharField(choices=[('PENDING', 'En attente'), ('CONFIRMED', 'Confirmé'), ('DECLINED', 'Refusé')], db_index=True, default='PENDING', max_length=12)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
                ('member', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='staffing.member')),
                ('service', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='staffing.service')),
            ],
            options={
                'verbose_name': 'Affectation',
                'verbose_name_plural': 'Affectations',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['service', 'member'], name='assignment_service_member_idx'),
                    models.Index(fields=['member', 'status'], name='assignment_member_status_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('service', 'member', 'role'), name='uniq_assignment_service_member_role'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Availability',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(db_index=True)),
                ('status', models.CharField(choices=[('available', 'Disponible'), ('unavailable', 'Indisponible'), ('busy', 'Occupé')], db_index=True, default='available', max_length=12)),
                ('notes', models.TextField(blank=True, null=True)),
                ('member', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='availabilities', to='staffing.member')),
            ],
            options={
                'verbose_name': 'Disponibilité',
                'verbose_name_plural': 'Disponibilités',
                'indexes': [models.Index(fields=['date', 'status'], name='availability_date_status_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('member', 'date'), name='uniq_availability_member_date'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SwapRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(db_index=True)),
                ('message', models.TextField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'En attente'), ('accepted', 'Accepté'), ('rejected', 'Refusé'), ('admin_approved', 'Approuvé'), ('admin_rejected', "Rejeté par l'administrateur")], db_index=True, default='pending', max_length=16)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('decided_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='swaps_decided', to='staffing.member')),
                ('from_member', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='swaps_sent', to='staffing.member')),
                ('service', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='swap_requests', to='staffing.service')),
                ('to_member', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='swaps_received', to='staffing.member')),
            ],
            options={
                'verbose_name': "Demande d'échange",
                'verbose_name_plural': "Demandes d'échange",
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'created_at'], name='swap_status_created_idx'),
                    models.Index(fields=['service', 'date'], name='swap_service_date_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('from_member', models.F('to_member')), _negated=True), name='swap_distinct_members'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('swap_request', "Demande d'échange"), ('swap_accepted', 'Échange accepté'), ('swap_rejected', 'Échange rejeté'), ('swap_approved', 'Échange approuvé'), ('service_reminder', 'Rappel de service')], db_index=True, max_length=24)),
                ('title', models.CharField(max_length=160)),
                ('message', models.TextField()),
                ('data', models.JSONField(blank=True, null=True)),
                ('read', models.BooleanField(db_index=True, default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('member', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to='staffing.member')),
            ],
            options={
                'verbose_name': 'Notification',
                'verbose_name_plural': 'Notifications',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['member', 'read'], name='notification_member_read_idx')],
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(db_index=True, max_length=50)),
                ('table', models.CharField(db_index=True, max_length=50)),
                ('record_id', models.CharField(max_length=50)),
                ('before', models.JSONField(blank=True, null=True)),
                ('after', models.JSONField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('author', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Audit',
                'verbose_name_plural': 'Audits',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['table', 'created_at'], name='audit_table_created_idx'),
                    models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
                ],
            },
        ),
    ]
