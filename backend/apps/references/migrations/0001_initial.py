import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('companies', '0001_initial'),
        ('master_data', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Reference',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField()),
                ('location', models.CharField(blank=True, max_length=255)),
                ('employees_involved', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('budget', models.CharField(blank=True, max_length=255)),
                ('status', models.CharField(choices=[('En cours', 'En cours'), ('Completed', 'Completed')], db_index=True, max_length=20)),
                ('priority', models.CharField(choices=[('High', 'High'), ('Medium', 'Medium'), ('Low', 'Low')], db_index=True, max_length=10)),
                ('responsible', models.CharField(db_index=True, max_length=255)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField(blank=True, null=True)),
                ('keywords', models.JSONField(blank=True, default=list)),
                ('screenshots', models.JSONField(blank=True, default=list)),
                ('completion_certificate', models.CharField(blank=True, max_length=500)),
                ('other_documents', models.JSONField(blank=True, default=list)),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='references', to='master_data.client')),
                ('company', models.ForeignKey(blank=True, help_text='Company this record belongs to', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to='companies.company')),
                ('country', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='references', to='master_data.country')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_references', to=settings.AUTH_USER_MODEL)),
                ('technologies', models.ManyToManyField(related_name='references', to='master_data.technology')),
            ],
            options={
                'db_table': 'project_references',
                'ordering': ['-created_at'],
            },
        ),
    ]
