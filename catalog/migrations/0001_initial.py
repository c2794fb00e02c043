from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.db.models.functions.text

APPROVAL_CHOICES = [("PENDING", "Pending"), ("APPROVED", "Approved"), ("REJECTED", "Rejected")]


def moderated_fields():
    return [
        ("is_public", models.BooleanField(default=True)),
        ("approval_status", models.CharField(
            choices=APPROVAL_CHOICES, db_index=True, default="PENDING", max_length=16,
        )),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                *moderated_fields(),
                ("name", models.CharField(max_length=120)),
                ("slug", models.SlugField(max_length=140)),
                ("description", models.TextField(blank=True)),
                ("owner", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="categories",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "verbose_name_plural": "categories",
                "ordering": ["name"],
                "indexes": [models.Index(fields=["is_public", "approval_status"], name="catalog_cat_visibility_idx")],
                "constraints": [
                    models.UniqueConstraint(django.db.models.functions.text.Lower("name"), name="catalog_category_name_ci_unique"),
                    models.UniqueConstraint(django.db.models.functions.text.Lower("slug"), name="catalog_category_slug_ci_unique"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Tag",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                *moderated_fields(),
                ("name", models.CharField(max_length=60)),
                ("slug", models.SlugField(max_length=80)),
                ("color", models.CharField(blank=True, default="", max_length=20)),
                ("owner", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="tags",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ["name"],
                "indexes": [models.Index(fields=["is_public", "approval_status"], name="catalog_tag_visibility_idx")],
                "constraints": [
                    models.UniqueConstraint(django.db.models.functions.text.Lower("name"), name="catalog_tag_name_ci_unique"),
                    models.UniqueConstraint(django.db.models.functions.text.Lower("slug"), name="catalog_tag_slug_ci_unique"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Resource",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                *moderated_fields(),
                ("title", models.CharField(max_length=255)),
                ("url", models.URLField(max_length=500)),
                ("description", models.TextField()),
                ("thumbnail", models.URLField(blank=True, default="", max_length=500)),
                ("is_hot", models.BooleanField(default=False)),
                ("is_trending", models.BooleanField(default=False)),
                ("click_count", models.PositiveIntegerField(default=0)),
                ("category", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="resources",
                    to="catalog.category",
                )),
                ("owner", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="resources",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="ResourceTag",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("resource", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="resource_tags",
                    to="catalog.resource",
                )),
                ("tag", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="resource_tags",
                    to="catalog.tag",
                )),
            ],
        ),
        migrations.AddField(
            model_name="resource",
            name="tags",
            field=models.ManyToManyField(
                blank=True, related_name="resources", through="catalog.ResourceTag", to="catalog.tag",
            ),
        ),
        migrations.AddConstraint(
            model_name="resourcetag",
            constraint=models.UniqueConstraint(fields=("resource", "tag"), name="catalog_resource_tag_unique"),
        ),
        migrations.AddIndex(
            model_name="resource",
            index=models.Index(fields=["is_public", "approval_status"], name="catalog_res_visibility_idx"),
        ),
        migrations.AddIndex(
            model_name="resource",
            index=models.Index(fields=["category", "is_hot", "is_trending"], name="catalog_res_cat_flags_idx"),
        ),
        migrations.AddConstraint(
            model_name="resource",
            constraint=models.UniqueConstraint(django.db.models.functions.text.Lower("title"), name="catalog_resource_title_ci_unique"),
        ),
        migrations.AddConstraint(
            model_name="resource",
            constraint=models.UniqueConstraint(django.db.models.functions.text.Lower("url"), name="catalog_resource_url_ci_unique"),
        ),
        migrations.CreateModel(
            name="Bookmark",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("resource", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="bookmarks",
                    to="catalog.resource",
                )),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="bookmarks",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("user", "resource"), name="catalog_bookmark_unique"),
                ],
            },
        ),
    ]
