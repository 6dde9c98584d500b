from django.db import models


class SystemSetting(models.Model):
    """
    Key/value configuration row editable by administrators.

    Capacity limits are stored here as ``capacity_limit_<vehicle_type>``.
    Values are kept as raw text; consumers parse them.
    """
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True, default='')
    description = models.TextField(blank=True, default='')
    updated_by = models.CharField(max_length=150, blank=True, default='')
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['key']

    def __str__(self):
        return f"{self.key}={self.value}"

    @classmethod
    def as_mapping(cls, prefix=''):
        """Return ``{key: value}`` for every setting whose key starts with ``prefix``."""
        queryset = cls.objects.all()
        if prefix:
            queryset = queryset.filter(key__startswith=prefix)
        return dict(queryset.values_list('key', 'value'))
