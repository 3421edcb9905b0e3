from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='File',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('type', models.CharField(choices=[('image', 'Image'), ('document', 'Document'), ('video', 'Video'), ('audio', 'Audio'), ('other', 'Other')], db_index=True, max_length=16)),
                ('extension', models.CharField(blank=True, max_length=32)),
                ('size', models.BigIntegerField(help_text='File size in bytes')),
                ('url', models.CharField(help_text='URL serving the blob object', max_length=500)),
                ('account_id', models.CharField(db_index=True, help_text='Identity account of the owner at upload time', max_length=36)),
                ('bucket_file_id', models.CharField(help_text='Blob object identifier in storage', max_length=36, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='files', to='accounts.user')),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['owner', '-created_at'], name='files_owner_recent_idx')],
            },
        ),
        migrations.CreateModel(
            name='FileCollaborator',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('email', models.EmailField(db_index=True, max_length=254)),
                ('file', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='collaborators', to='files.file')),
            ],
            options={
                'verbose_name': 'Collaborator',
                'verbose_name_plural': 'Collaborators',
            },
        ),
    ]
