import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='Tenant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=100)),
                ('subdomain', models.CharField(max_length=50, unique=True)),
                ('domain', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('email', models.CharField(max_length=100)),
                ('phone', models.CharField(blank=True, max_length=20, null=True)),
                ('address', models.TextField(blank=True, null=True)),
                ('settings', models.JSONField(blank=True, null=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive'), ('suspended', 'Suspended')], db_index=True, default='active', max_length=10)),
                ('subscription_plan', models.CharField(choices=[('basic', 'Basic'), ('premium', 'Premium'), ('enterprise', 'Enterprise')], default='basic', max_length=10)),
                ('subscription_expires_at', models.DateTimeField(blank=True, null=True)),
                ('database_name', models.CharField(blank=True, max_length=100, null=True)),
                ('database_host', models.CharField(blank=True, max_length=100, null=True)),
                ('database_port', models.IntegerField(blank=True, null=True)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'db_table': 'tenants',
                'indexes': [models.Index(fields=['created_at'], name='tenants_created_at_idx')],
            },
        ),
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('phone', models.CharField(blank=True, max_length=20, null=True)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('gender', models.CharField(blank=True, choices=[('male', 'Male'), ('female', 'Female'), ('other', 'Other')], max_length=10, null=True)),
                ('role', models.CharField(choices=[('admin', 'Administrator'), ('doctor', 'Doctor'), ('midwife', 'Midwife'), ('patient', 'Patient')], default='patient', max_length=10)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive'), ('suspended', 'Suspended')], default='active', max_length=10)),
                ('last_login_at', models.DateTimeField(blank=True, null=True)),
                ('last_login_ip', models.CharField(blank=True, max_length=45, null=True)),
                ('preferred_language', models.CharField(default='fr', max_length=5)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
                ('tenant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='users', to='records.tenant')),
            ],
            options={
                'db_table': 'users',
                'indexes': [
                    models.Index(fields=['tenant', 'status'], name='users_tenant_status_idx'),
                    models.Index(fields=['email'], name='users_email_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant', 'email'), name='users_tenant_email_uniq'),
                ],
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='PersonnelCategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=100, unique=True)),
                ('nom_category', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, null=True)),
                ('color_code', models.CharField(blank=True, default='#2E7D32', max_length=7, null=True)),
                ('icon', models.CharField(blank=True, default='fa-user', max_length=50, null=True)),
                ('sort_order', models.IntegerField(default=1)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'db_table': 'personnel_categories',
            },
        ),
        migrations.CreateModel(
            name='PersonnelSubcategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(db_index=True, max_length=100)),
                ('nom_subcategory', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, null=True)),
                ('requires_specialization', models.BooleanField(default=False)),
                ('sort_order', models.IntegerField(default=1)),
                ('is_active', models.BooleanField(default=True)),
                ('category', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='subcategories', to='records.personnelcategory')),
            ],
            options={
                'db_table': 'personnel_subcategories',
                'constraints': [
                    models.UniqueConstraint(fields=('category', 'name'), name='subcategory_category_name_uniq'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TypePersonnel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=100, unique=True)),
                ('nom_type', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, null=True)),
                ('level', models.IntegerField(default=1)),
                ('can_prescribe', models.BooleanField(default=False)),
                ('can_supervise', models.BooleanField(default=False)),
                ('can_validate_acts', models.BooleanField(default=False)),
                ('requires_license', models.BooleanField(default=False)),
                ('min_experience_years', models.IntegerField(default=0)),
                ('is_medical_staff', models.BooleanField(default=False)),
                ('is_administrative', models.BooleanField(default=False)),
                ('is_technical', models.BooleanField(default=False)),
                ('sort_order', models.IntegerField(default=1)),
                ('is_active', models.BooleanField(default=True)),
                ('category', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='personnel_types', to='records.personnelcategory')),
                ('subcategory', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='personnel_types', to='records.personnelsubcategory')),
            ],
            options={
                'db_table': 'type_personnels',
                'indexes': [
                    models.Index(fields=['category', 'level'], name='type_pers_category_level_idx'),
                    models.Index(fields=['is_medical_staff', 'is_active'], name='type_pers_medical_active_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Role',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(db_index=True, max_length=100)),
                ('display_name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, null=True)),
                ('type_personnel', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='roles', to='records.typepersonnel')),
            ],
            options={
                'db_table': 'roles',
            },
        ),
        migrations.CreateModel(
            name='Personnel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('license_number', models.CharField(blank=True, db_index=True, max_length=100, null=True)),
                ('specialties', models.JSONField(blank=True, null=True)),
                ('department', models.CharField(blank=True, max_length=100, null=True)),
                ('service', models.CharField(blank=True, max_length=100, null=True)),
                ('hire_date', models.DateField(blank=True, null=True)),
                ('end_date', models.DateField(blank=True, null=True)),
                ('contract_type', models.CharField(choices=[('CDI', 'CDI'), ('CDD', 'CDD'), ('VACATION', 'Vacation'), ('STAGE', 'Stage')], default='CDI', max_length=10)),
                ('is_active', models.BooleanField(default=True)),
                ('is_on_duty', models.BooleanField(db_index=True, default=False)),
                ('notes', models.TextField(blank=True, null=True)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='personnel', to='records.tenant')),
                ('type_personnel', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='personnel', to='records.typepersonnel')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='personnel_records', to='records.user')),
            ],
            options={
                'db_table': 'personnel',
                'indexes': [
                    models.Index(fields=['tenant', 'type_personnel'], name='personnel_tenant_type_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant', 'user'), name='personnel_tenant_user_uniq'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Patient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('patient_number', models.CharField(db_index=True, max_length=50)),
                ('national_id', models.CharField(blank=True, db_index=True, max_length=50, null=True)),
                ('first_name', models.CharField(max_length=100)),
                ('last_name', models.CharField(max_length=100)),
                ('date_of_birth', models.DateField()),
                ('gender', models.CharField(choices=[('male', 'Male'), ('female', 'Female')], max_length=10)),
                ('phone', models.CharField(blank=True, max_length=20, null=True)),
                ('email', models.CharField(blank=True, max_length=100, null=True)),
                ('address', models.TextField(blank=True, null=True)),
                ('city', models.CharField(blank=True, max_length=100, null=True)),
                ('region', models.CharField(blank=True, max_length=100, null=True)),
                ('emergency_contact_name', models.CharField(blank=True, max_length=100, null=True)),
                ('emergency_contact_phone', models.CharField(blank=True, max_length=20, null=True)),
                ('emergency_contact_relation', models.CharField(blank=True, max_length=50, null=True)),
                ('blood_type', models.CharField(blank=True, choices=[('A+', 'A+'), ('A-', 'A-'), ('B+', 'B+'), ('B-', 'B-'), ('AB+', 'AB+'), ('AB-', 'AB-'), ('O+', 'O+'), ('O-', 'O-')], max_length=3, null=True)),
                ('allergies', models.JSONField(blank=True, null=True)),
                ('medical_history', models.JSONField(blank=True, null=True)),
                ('current_medications', models.JSONField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
                ('assigned_doctor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='doctor_patients', to='records.personnel')),
                ('assigned_midwife', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='midwife_patients', to='records.personnel')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='patients', to='records.tenant')),
            ],
            options={
                'db_table': 'patients',
                'indexes': [
                    models.Index(fields=['tenant', 'is_active'], name='patients_tenant_active_idx'),
                    models.Index(fields=['first_name', 'last_name'], name='patients_name_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('tenant', 'patient_number'), name='patients_tenant_number_uniq'),
                    models.UniqueConstraint(fields=('patient_number', 'national_id'), name='patients_number_national_uniq'),
                ],
            },
        ),
        migrations.CreateModel(
            name='TypeVisite',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=100, unique=True)),
                ('nom_type', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, null=True)),
                ('duration_minutes', models.IntegerField(default=30)),
                ('requires_appointment', models.BooleanField(default=True)),
                ('is_emergency', models.BooleanField(default=False)),
                ('requires_doctor', models.BooleanField(default=False)),
                ('requires_midwife', models.BooleanField(default=False)),
                ('requires_nurse', models.BooleanField(default=False)),
                ('allowed_personnel_types', models.JSONField(blank=True, null=True)),
                ('color_code', models.CharField(blank=True, default='#2E7D32', max_length=7, null=True)),
                ('icon', models.CharField(blank=True, default='fa-calendar', max_length=50, null=True)),
                ('sort_order', models.IntegerField(default=1)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'db_table': 'type_visite',
                'indexes': [
                    models.Index(fields=['is_emergency', 'is_active'], name='type_visite_emergency_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Visit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('scheduled_at', models.DateTimeField(blank=True, null=True)),
                ('started_at', models.DateTimeField(blank=True, null=True)),
                ('ended_at', models.DateTimeField(blank=True, null=True)),
                ('duration_minutes', models.IntegerField(blank=True, null=True)),
                ('status', models.CharField(choices=[('scheduled', 'Scheduled'), ('in_progress', 'In progress'), ('completed', 'Completed'), ('cancelled', 'Cancelled'), ('no_show', 'No show')], db_index=True, default='scheduled', max_length=12)),
                ('chief_complaint', models.TextField(blank=True, null=True)),
                ('history_present_illness', models.TextField(blank=True, null=True)),
                ('physical_examination', models.TextField(blank=True, null=True)),
                ('diagnosis', models.TextField(blank=True, null=True)),
                ('treatment_plan', models.TextField(blank=True, null=True)),
                ('prescriptions', models.TextField(blank=True, null=True)),
                ('recommendations', models.TextField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('weight_kg', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('height_cm', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('bmi', models.DecimalField(blank=True, decimal_places=2, max_digits=4, null=True)),
                ('systolic_bp', models.IntegerField(blank=True, null=True)),
                ('diastolic_bp', models.IntegerField(blank=True, null=True)),
                ('heart_rate', models.IntegerField(blank=True, null=True)),
                ('temperature_c', models.DecimalField(blank=True, decimal_places=2, max_digits=4, null=True)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='visits', to='records.patient')),
                ('personnel', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='visits', to='records.personnel')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='visits', to='records.tenant')),
                ('type_visite', models.ForeignKey(on_delete=django.db.models.deletion.RESTRICT, related_name='visits', to='records.typevisite')),
            ],
            options={
                'db_table': 'visite',
                'indexes': [
                    models.Index(fields=['tenant', 'status'], name='visite_tenant_status_idx'),
                    models.Index(fields=['patient', 'scheduled_at'], name='visite_patient_sched_idx'),
                    models.Index(fields=['personnel', 'scheduled_at'], name='visite_personnel_sched_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MedicalHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('type', models.CharField(choices=[('allergy', 'Allergy'), ('condition', 'Condition'), ('surgery', 'Surgery'), ('medication', 'Medication'), ('family_history', 'Family history')], max_length=20)),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, null=True)),
                ('date_recorded', models.DateField(blank=True, null=True)),
                ('severity', models.CharField(blank=True, choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High'), ('critical', 'Critical')], max_length=10, null=True)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='medical_histories', to='records.patient')),
            ],
            options={
                'db_table': 'medical_histories',
                'indexes': [
                    models.Index(fields=['patient', 'type'], name='med_hist_patient_type_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='VisitHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('action', models.CharField(choices=[('created', 'Created'), ('updated', 'Updated'), ('cancelled', 'Cancelled'), ('completed', 'Completed'), ('rescheduled', 'Rescheduled')], max_length=12)),
                ('changes', models.JSONField(blank=True, null=True)),
                ('reason', models.TextField(blank=True, null=True)),
                ('action_date', models.DateTimeField()),
                ('modified_by', models.ForeignKey(db_column='modified_by', on_delete=django.db.models.deletion.RESTRICT, related_name='visit_histories', to='records.personnel')),
                ('visit', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='histories', to='records.visit')),
            ],
            options={
                'db_table': 'visit_histories',
                'indexes': [
                    models.Index(fields=['visit', 'action_date'], name='visit_hist_visit_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SuperAdmin',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('access_level', models.CharField(default='full', max_length=50)),
                ('permissions_override', models.JSONField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='super_admin', to='records.user')),
            ],
            options={
                'db_table': 'super_admins',
            },
        ),
        migrations.CreateModel(
            name='PatientQr',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('qr_code', models.CharField(max_length=100, unique=True)),
                ('qr_code_image', models.TextField()),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('expires_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('last_scanned_at', models.DateTimeField(blank=True, null=True)),
                ('scan_count', models.IntegerField(default=0)),
                ('patient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='qr_codes', to='records.patient')),
            ],
            options={
                'db_table': 'patient_qrs',
            },
        ),
    ]
