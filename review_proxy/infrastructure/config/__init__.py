from .settings import Settings, get_settings, product_id_env_key, clean_shop_domain

__all__ = ["Settings", "get_settings", "product_id_env_key", "clean_shop_domain"]
