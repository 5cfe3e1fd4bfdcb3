from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Permission",
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
                ("name", models.CharField(max_length=255)),
                ("guard_name", models.CharField(max_length=64)),
                (
                    "relation_slug",
                    models.CharField(blank=True, max_length=255, null=True),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "shield_permissions",
                "ordering": ["guard_name", "name", "id"],
                "indexes": [
                    models.Index(
                        fields=["relation_slug"],
                        name="idx_shield_perm_relation",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("name", "guard_name"),
                        name="uq_shield_permission_name_guard",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Role",
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
                ("name", models.CharField(max_length=255)),
                ("guard_name", models.CharField(max_length=64)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "shield_roles",
                "ordering": ["guard_name", "name", "id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("name", "guard_name"),
                        name="uq_shield_role_name_guard",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="RolePermission",
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
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "permission",
                    models.ForeignKey(
                        db_column="permission_id",
                        on_delete=models.deletion.CASCADE,
                        related_name="role_permissions",
                        to="shield_permissions_store.permission",
                    ),
                ),
                (
                    "role",
                    models.ForeignKey(
                        db_column="role_id",
                        on_delete=models.deletion.CASCADE,
                        related_name="role_permissions",
                        to="shield_permissions_store.role",
                    ),
                ),
            ],
            options={
                "db_table": "shield_role_permissions",
                "ordering": ["role_id", "permission_id", "id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("role", "permission"),
                        name="uq_shield_role_permission",
                    ),
                ],
            },
        ),
        migrations.AddField(
            model_name="role",
            name="permissions",
            field=models.ManyToManyField(
                related_name="roles",
                through="shield_permissions_store.RolePermission",
                to="shield_permissions_store.permission",
            ),
        ),
        migrations.CreateModel(
            name="UserRole",
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
                ("user_id", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "role",
                    models.ForeignKey(
                        db_column="role_id",
                        on_delete=models.deletion.CASCADE,
                        related_name="user_roles",
                        to="shield_permissions_store.role",
                    ),
                ),
            ],
            options={
                "db_table": "shield_user_roles",
                "ordering": ["user_id", "role_id", "id"],
                "indexes": [
                    models.Index(
                        fields=["user_id"],
                        name="idx_shield_user_role_user",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user_id", "role"),
                        name="uq_shield_user_role",
                    ),
                ],
            },
        ),
    ]
