from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("businesses", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="BusinessModelCanvas",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("key_partners", models.JSONField(blank=True, default=list)),
                ("key_activities", models.JSONField(blank=True, default=list)),
                ("key_resources", models.JSONField(blank=True, default=list)),
                ("value_propositions", models.JSONField(blank=True, default=list)),
                ("customer_relationships", models.JSONField(blank=True, default=list)),
                ("channels", models.JSONField(blank=True, default=list)),
                ("customer_segments", models.JSONField(blank=True, default=list)),
                ("cost_structure", models.JSONField(blank=True, default=list)),
                ("revenue_streams", models.JSONField(blank=True, default=list)),
                (
                    "business",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="business_model_canvas",
                        to="businesses.business",
                    ),
                ),
            ],
            options={
                "db_table": "business_model_canvas",
            },
        ),
        migrations.CreateModel(
            name="ValuePropositionCanvas",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("customer_jobs", models.JSONField(blank=True, default=list)),
                ("pains", models.JSONField(blank=True, default=list)),
                ("gains", models.JSONField(blank=True, default=list)),
                ("products_services", models.JSONField(blank=True, default=list)),
                ("pain_relievers", models.JSONField(blank=True, default=list)),
                ("gain_creators", models.JSONField(blank=True, default=list)),
                (
                    "business",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="value_proposition_canvas",
                        to="businesses.business",
                    ),
                ),
            ],
            options={
                "db_table": "value_proposition_canvas",
            },
        ),
    ]
