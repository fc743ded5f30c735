import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

SCOPE_CHOICES = [('own', 'Own'), ('department', 'Department'), ('tenant', 'Tenant'), ('global', 'Global')]


class Migration(migrations.Migration):

    dependencies = [
        ('records', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='role',
            name='tenant',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='roles', to='records.tenant'),
        ),
        migrations.AddField(
            model_name='role',
            name='level',
            field=models.IntegerField(default=1),
        ),
        migrations.AddField(
            model_name='role',
            name='is_system',
            field=models.BooleanField(default=False),
        ),
        migrations.AddField(
            model_name='role',
            name='is_medical',
            field=models.BooleanField(default=False),
        ),
        migrations.AddField(
            model_name='role',
            name='is_administrative',
            field=models.BooleanField(default=False),
        ),
        migrations.AddField(
            model_name='role',
            name='is_active',
            field=models.BooleanField(default=True),
        ),
        migrations.AddField(
            model_name='role',
            name='is_assignable',
            field=models.BooleanField(default=True),
        ),
        migrations.AddConstraint(
            model_name='role',
            constraint=models.UniqueConstraint(fields=('tenant', 'name'), name='roles_tenant_name_uniq'),
        ),
        migrations.AddIndex(
            model_name='role',
            index=models.Index(fields=['level', 'is_active'], name='roles_level_active_idx'),
        ),
        migrations.CreateModel(
            name='Permission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=100, unique=True)),
                ('display_name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, null=True)),
                ('module', models.CharField(db_index=True, max_length=50)),
                ('action', models.CharField(db_index=True, max_length=50)),
                ('scope', models.CharField(choices=SCOPE_CHOICES, default='own', max_length=10)),
                ('requires_supervision', models.BooleanField(default=False)),
                ('min_level_required', models.IntegerField(blank=True, null=True)),
                ('is_system', models.BooleanField(default=False)),
                ('is_medical', models.BooleanField(default=False)),
                ('is_sensitive', models.BooleanField(default=False)),
                ('requires_audit', models.BooleanField(default=False)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'db_table': 'permissions',
                'indexes': [
                    models.Index(fields=['module', 'action'], name='permissions_module_action_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='UserRole',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('department', models.CharField(blank=True, max_length=100, null=True)),
                ('service', models.CharField(blank=True, max_length=100, null=True)),
                ('assigned_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('expires_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('assignment_reason', models.TextField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('is_primary', models.BooleanField(default=False)),
                ('assigned_by', models.ForeignKey(blank=True, db_column='assigned_by', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='records.user')),
                ('role', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='records.role')),
                ('tenant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='role_assignments', to='records.tenant')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='role_assignments', to='records.user')),
            ],
            options={
                'db_table': 'user_roles',
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'tenant', 'role'), name='user_roles_user_tenant_role_uniq'),
                ],
                'indexes': [
                    models.Index(fields=['user', 'is_active'], name='user_roles_user_active_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RolePermission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('scope_override', models.CharField(blank=True, choices=SCOPE_CHOICES, max_length=10, null=True)),
                ('valid_from', models.DateTimeField(blank=True, null=True)),
                ('valid_until', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('granted_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('grant_reason', models.TextField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('granted_by', models.ForeignKey(blank=True, db_column='granted_by', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='records.user')),
                ('permission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='role_grants', to='records.permission')),
                ('role', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='grants', to='records.role')),
                ('tenant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='role_permissions', to='records.tenant')),
            ],
            options={
                'db_table': 'role_permissions',
                'constraints': [
                    models.UniqueConstraint(fields=('role', 'permission', 'tenant'), name='role_perms_role_perm_tenant_uniq'),
                ],
            },
        ),
        migrations.CreateModel(
            name='UserPermission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('granted_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('expires_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('grant_reason', models.TextField(blank=True, null=True)),
                ('scope_override', models.CharField(blank=True, choices=SCOPE_CHOICES, max_length=10, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('granted_by', models.ForeignKey(blank=True, db_column='granted_by', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='records.user')),
                ('permission', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='user_grants', to='records.permission')),
                ('tenant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='user_permissions', to='records.tenant')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='permission_grants', to='records.user')),
            ],
            options={
                'db_table': 'user_permissions',
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'permission', 'tenant'), name='user_perms_user_perm_tenant_uniq'),
                ],
            },
        ),
        migrations.CreateModel(
            name='CrossTenantAccessLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('qr_code', models.CharField(blank=True, max_length=100, null=True)),
                ('access_level', models.CharField(choices=[('full', 'Full'), ('basic', 'Basic'), ('emergency', 'Emergency'), ('none', 'None')], max_length=10)),
                ('access_type', models.CharField(choices=[('qr_scan', 'QR scan'), ('emergency_token', 'Emergency token'), ('direct_access', 'Direct access')], max_length=20)),
                ('ip_address', models.CharField(blank=True, max_length=45, null=True)),
                ('user_agent', models.CharField(blank=True, max_length=255, null=True)),
                ('accessed_data', models.JSONField(blank=True, null=True)),
                ('access_granted', models.BooleanField()),
                ('denial_reason', models.CharField(blank=True, max_length=255, null=True)),
                ('accessed_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='access_logs', to='records.patient')),
                ('patient_tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='incoming_accesses', to='records.tenant')),
                ('scanner_tenant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='outgoing_accesses', to='records.tenant')),
                ('scanner_user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='cross_tenant_accesses', to='records.user')),
            ],
            options={
                'db_table': 'cross_tenant_access_logs',
                'indexes': [
                    models.Index(fields=['scanner_user', 'accessed_at'], name='idx_scanner_access'),
                    models.Index(fields=['patient', 'accessed_at'], name='idx_patient_access'),
                    models.Index(fields=['scanner_tenant', 'patient_tenant'], name='idx_cross_tenant'),
                    models.Index(fields=['access_level', 'access_granted'], name='idx_access_result'),
                ],
            },
        ),
    ]
