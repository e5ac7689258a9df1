from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="LedgerRecord",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "kind",
                    models.CharField(
                        help_text="Snapshot collection key (e.g. products, transactions).",
                        max_length=40,
                    ),
                ),
                (
                    "record_id",
                    models.CharField(
                        help_text="Identity of the record inside its collection.",
                        max_length=255,
                    ),
                ),
                (
                    "position",
                    models.PositiveIntegerField(
                        help_text="Order of the record inside its collection.",
                    ),
                ),
                (
                    "data",
                    models.JSONField(
                        help_text="JSON-compatible record with camelCase attribute names.",
                    ),
                ),
            ],
            options={
                "db_table": "manara_ledger_record",
                "ordering": ["kind", "position"],
            },
        ),
        migrations.AddConstraint(
            model_name="ledgerrecord",
            constraint=models.UniqueConstraint(
                fields=("kind", "record_id"),
                name="uq_ledger_kind_record",
            ),
        ),
        migrations.AddIndex(
            model_name="ledgerrecord",
            index=models.Index(
                fields=["kind", "position"],
                name="idx_ledger_kind_pos",
            ),
        ),
    ]
