from .asset_link import AssetLinkPlugin, COMPONENT_CLASSES

__all__ = ["AssetLinkPlugin", "COMPONENT_CLASSES"]
