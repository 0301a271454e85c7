from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("study", "0001_initial"),
    ]

    operations = [
        migrations.AddConstraint(
            model_name="studyprogress",
            constraint=models.CheckConstraint(
                condition=models.Q(("skill__in", ["read", "write", "listen", "speak"])),
                name="ck_progress_skill",
            ),
        ),
    ]
