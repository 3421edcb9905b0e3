from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('identity', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='emailtoken',
            name='failed_attempts',
            field=models.PositiveSmallIntegerField(default=0, help_text='Wrong codes submitted against this token'),
        ),
    ]
