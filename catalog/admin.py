"""Admin registration for catalog models."""

from django.contrib import admin

from .models import Category, Product


class ProductInline(admin.TabularInline):
    model = Product
    extra = 0
    fields = ("name", "price", "in_stock", "pre_order", "min_order_time")
    show_change_link = True


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "updated_at")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}
    inlines = [ProductInline]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "price", "in_stock", "featured", "pre_order", "min_order_time")
    search_fields = ("name", "slug", "ingredients")
    list_filter = ("category", "in_stock", "featured", "pre_order")
    list_editable = ("in_stock", "featured")
    prepopulated_fields = {"slug": ("name",)}
    list_select_related = ("category",)
