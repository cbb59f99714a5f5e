"""VulnShop services - helpers shared by the HTTP routes."""
from .snapshots import SnapshotClient
from .proxy import ServiceProxy
from .order_xml import parse_order, orders_to_xml

__all__ = [
    'SnapshotClient',
    'ServiceProxy',
    'parse_order', 'orders_to_xml',
]
