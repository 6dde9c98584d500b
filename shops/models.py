from django.db import models


class Shop(models.Model):
    """
    Retail shop that ships e-commerce orders from its own stock.
    """
    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=150)
    address = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return f"{self.code} {self.name}"


class ShopInventory(models.Model):
    """
    Stock of one product variant held at one shop.
    """
    shop = models.ForeignKey(Shop, on_delete=models.CASCADE, related_name='inventory')
    product_variant_id = models.CharField(max_length=64)
    product_name = models.CharField(max_length=200, blank=True)
    stock = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['shop', 'product_variant_id']
        verbose_name_plural = "Shop inventory"
        constraints = [
            models.UniqueConstraint(fields=['shop', 'product_variant_id'], name='unique_shop_variant_stock'),
        ]

    def __str__(self):
        return f"{self.shop.code}/{self.product_variant_id}: {self.stock}"
