from django.db import migrations, models


def fill_keywords_text(apps, schema_editor):
    Reference = apps.get_model('references', 'Reference')
    for reference in Reference.objects.only('pk', 'keywords').iterator():
        text = '\n'.join(str(keyword).lower() for keyword in reference.keywords or [])
        Reference.objects.filter(pk=reference.pk).update(keywords_text=text)


class Migration(migrations.Migration):

    dependencies = [
        ('references', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='reference',
            name='keywords_text',
            field=models.TextField(blank=True, default='', editable=False),
        ),
        migrations.RunPython(fill_keywords_text, migrations.RunPython.noop),
    ]
