from rest_framework import serializers

from catalog.serializers import ProductListSerializer

from .models import Favorite


class FavoriteSerializer(serializers.ModelSerializer):
    product = ProductListSerializer(read_only=True)

    class Meta:
        model = Favorite
        fields = ["id", "product", "created_at"]
        read_only_fields = fields


class FavoriteCreateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)


class FavoriteIdsSerializer(serializers.Serializer):
    favorite_ids = serializers.ListField(child=serializers.IntegerField())
