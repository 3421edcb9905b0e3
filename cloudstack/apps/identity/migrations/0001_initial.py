from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='IdentityAccount',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('account_id', models.CharField(help_text='Provider account identifier', max_length=36, unique=True)),
                ('email', models.EmailField(help_text='Address one-time codes are sent to', max_length=254, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Identity Account',
                'verbose_name_plural': 'Identity Accounts',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='EmailToken',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('secret_hash', models.CharField(help_text='Hashed one-time code', max_length=128)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('expires_at', models.DateTimeField(db_index=True)),
                ('account', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='email_tokens', to='identity.identityaccount')),
            ],
            options={
                'verbose_name': 'Email Token',
                'verbose_name_plural': 'Email Tokens',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='IdentitySession',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('session_id', models.CharField(help_text='Public session identifier', max_length=36, unique=True)),
                ('secret', models.CharField(help_text='Opaque secret stored in the session cookie', max_length=128, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('last_activity', models.DateTimeField(auto_now=True, db_index=True)),
                ('expires_at', models.DateTimeField(db_index=True)),
                ('account', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sessions', to='identity.identityaccount')),
            ],
            options={
                'verbose_name': 'Identity Session',
                'verbose_name_plural': 'Identity Sessions',
                'ordering': ['-last_activity'],
            },
        ),
    ]
