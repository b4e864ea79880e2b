import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import social.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Artist',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, unique=True)),
                ('spotify_id', models.CharField(blank=True, max_length=64, null=True)),
                ('biography', models.TextField(blank=True, default='')),
                ('profile_picture_url', models.URLField(blank=True, default='')),
                ('genres', models.JSONField(blank=True, default=social.models.id_list)),
                ('posts', models.JSONField(blank=True, default=social.models.id_list)),
                ('likes', models.PositiveIntegerField(default=0)),
                ('likers', models.JSONField(blank=True, default=social.models.id_list)),
                ('followers', models.JSONField(blank=True, default=social.models.id_list)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Album',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=300)),
                ('description', models.TextField(blank=True, default='')),
                ('cover', models.URLField(blank=True, default='')),
                ('release_date', models.DateField(blank=True, null=True)),
                ('posts', models.JSONField(blank=True, default=social.models.id_list)),
                ('likes', models.PositiveIntegerField(default=0)),
                ('likers', models.JSONField(blank=True, default=social.models.id_list)),
                ('followers', models.JSONField(blank=True, default=social.models.id_list)),
                ('artists', models.ManyToManyField(blank=True, related_name='albums', to='social.artist')),
            ],
        ),
        migrations.CreateModel(
            name='Profile',
            fields=[
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='profile', serialize=False, to=settings.AUTH_USER_MODEL)),
                ('profile_picture_url', models.URLField(blank=True, default='')),
                ('is_artist', models.BooleanField(default=False)),
                ('follow_lists_public', models.BooleanField(default=False)),
                ('following', models.JSONField(blank=True, default=social.models.id_list)),
                ('followers', models.JSONField(blank=True, default=social.models.id_list)),
                ('followed_artists', models.JSONField(blank=True, default=social.models.id_list)),
                ('followed_albums', models.JSONField(blank=True, default=social.models.id_list)),
                ('followed_tracks', models.JSONField(blank=True, default=social.models.id_list)),
                ('posts', models.JSONField(blank=True, default=social.models.id_list)),
                ('comments', models.JSONField(blank=True, default=social.models.id_list)),
                ('liked_posts', models.JSONField(blank=True, default=social.models.id_list)),
                ('disliked_posts', models.JSONField(blank=True, default=social.models.id_list)),
                ('liked_comments', models.JSONField(blank=True, default=social.models.id_list)),
                ('disliked_comments', models.JSONField(blank=True, default=social.models.id_list)),
                ('liked_artists', models.JSONField(blank=True, default=social.models.id_list)),
                ('liked_albums', models.JSONField(blank=True, default=social.models.id_list)),
                ('liked_tracks', models.JSONField(blank=True, default=social.models.id_list)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name='Track',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=300)),
                ('spotify_id', models.CharField(blank=True, max_length=64, null=True)),
                ('description', models.TextField(blank=True, default='')),
                ('explicit', models.BooleanField(default=False)),
                ('disc_number', models.PositiveSmallIntegerField(default=1)),
                ('track_number', models.PositiveSmallIntegerField(default=1)),
                ('duration', models.PositiveIntegerField(default=0)),
                ('posts', models.JSONField(blank=True, default=social.models.id_list)),
                ('likes', models.PositiveIntegerField(default=0)),
                ('likers', models.JSONField(blank=True, default=social.models.id_list)),
                ('followers', models.JSONField(blank=True, default=social.models.id_list)),
                ('album', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='tracks', to='social.album')),
                ('artists', models.ManyToManyField(blank=True, related_name='tracks', to='social.artist')),
            ],
        ),
        migrations.CreateModel(
            name='Post',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=300)),
                ('post_type', models.CharField(choices=[('ARTIST', 'Artist'), ('ALBUM', 'Album'), ('TRACK', 'Track')], max_length=10)),
                ('content_type', models.CharField(choices=[('TEXT', 'Text'), ('MEDIA', 'Media')], default='TEXT', max_length=10)),
                ('content', models.TextField()),
                ('likes', models.PositiveIntegerField(default=0)),
                ('dislikes', models.PositiveIntegerField(default=0)),
                ('likers', models.JSONField(blank=True, default=social.models.id_list)),
                ('dislikers', models.JSONField(blank=True, default=social.models.id_list)),
                ('comments', models.JSONField(blank=True, default=social.models.id_list)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('album', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, to='social.album')),
                ('artist', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, to='social.artist')),
                ('poster', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to='social.profile')),
                ('track', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, to='social.track')),
            ],
            options={
                'ordering': ['-created_at'],
                'constraints': [
                    models.CheckConstraint(
                        condition=(
                            models.Q(('album__isnull', True), ('artist__isnull', False), ('post_type', 'ARTIST'), ('track__isnull', True))
                            | models.Q(('album__isnull', False), ('artist__isnull', True), ('post_type', 'ALBUM'), ('track__isnull', True))
                            | models.Q(('album__isnull', True), ('artist__isnull', True), ('post_type', 'TRACK'), ('track__isnull', False))
                        ),
                        name='post_has_exactly_one_target',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='Comment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('content', models.TextField()),
                ('likes', models.PositiveIntegerField(default=0)),
                ('dislikes', models.PositiveIntegerField(default=0)),
                ('likers', models.JSONField(blank=True, default=social.models.id_list)),
                ('dislikers', models.JSONField(blank=True, default=social.models.id_list)),
                ('children', models.JSONField(blank=True, default=social.models.id_list)),
                ('state', models.CharField(choices=[('ACTIVE', 'Active'), ('DELETED', 'Deleted')], default='ACTIVE', max_length=10)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('parent', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='replies', to='social.comment')),
                ('post', models.ForeignKey(db_constraint=False, on_delete=django.db.models.deletion.DO_NOTHING, to='social.post')),
                ('poster', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to='social.profile')),
            ],
            options={
                'ordering': ['created_at', 'id'],
                'indexes': [models.Index(fields=['post', 'created_at'], name='comment_post_created_idx')],
            },
        ),
    ]
