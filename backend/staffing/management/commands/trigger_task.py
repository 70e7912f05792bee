from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError
from kombu.exceptions import OperationalError

from staffing.tasks import daily_reminder, send_swap_email

class Command(BaseCommand):
    help = (
        "Dispara tasks do Celery manualmente para testes.\n"
        "Use --sync para executar a task no mesmo processo (sem Celery)."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "name",
            choices=["daily_reminder", "swap_email"],
            help="Nome da task a enfileirar/executar.",
        )
        parser.add_argument("--event", type=str, help="Evento de troca (para swap_email), ex.: swap_request.")
        parser.add_argument("--swap", type=int, help="ID do pedido de troca (para swap_email).")
        parser.add_argument("--recipient", type=int, help="ID do membro destinatário (para swap_email).")
        parser.add_argument(
            "--sync",
            action="store_true",
            help="Executa a task de forma síncrona (sem broker/worker).",
        )

    def _task_args(self, name: str, opts) -> tuple:
        if name == "daily_reminder":
            return (daily_reminder, ())
        missing = [k for k in ("event", "swap", "recipient") if opts.get(k) is None]
        if missing:
            raise CommandError(f"swap_email exige: {', '.join('--' + k for k in missing)}")
        return (send_swap_email, (opts["event"], opts["swap"], opts["recipient"]))

    def handle(self, *args, **opts):
        name: str = opts["name"]
        task, task_args = self._task_args(name, opts)

        if opts.get("sync"):
            result = task(*task_args)
            self.stdout.write(self.style.SUCCESS(f"[sync] {task.name} → {result!r}"))
            return

        try:
            res = task.delay(*task_args)
        except OperationalError as e:
            self.stderr.write(self.style.ERROR(f"Falha ao enfileirar '{name}': {e}"))
            self.stderr.write("Dica: use --sync para executar sem Celery.")
            raise SystemExit(2)
        self.stdout.write(self.style.SUCCESS(f"[async] enfileirada {task.name}: {res.id}"))
