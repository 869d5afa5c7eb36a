from prometheus_client import Counter


reminders_materialized_total = Counter(
    "reminders_materialized_total",
    "Total reminder regenerations for a baby",
)

reminders_created_total = Counter(
    "reminders_created_total",
    "Total reminder rows inserted by the materializer",
)

sweep_runs_total = Counter(
    "reminder_sweep_runs_total",
    "Total dispatch sweep runs",
    ["reminder_type"],
)

sweep_skipped_total = Counter(
    "reminder_sweep_skipped_total",
    "Sweep ticks skipped because a run of the same type was still in flight",
    ["reminder_type"],
)

reminders_sent_total = Counter(
    "reminders_sent_total",
    "Total reminder rows marked sent",
    ["reminder_type"],
)

reminder_emails_sent_total = Counter(
    "reminder_emails_sent_total",
    "Total reminder emails accepted by the SMTP server",
)

reminder_emails_failed_total = Counter(
    "reminder_emails_failed_total",
    "Total reminder emails that failed to send",
)
