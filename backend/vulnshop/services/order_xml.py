"""XML import and export of orders."""
from typing import List

from lxml import etree

from ..core.database import Row
from ..models.schemas import XMLOrder

ORDER_FIELDS = ("id", "user_id", "product_id", "quantity", "total_price")


def parse_order(document: bytes) -> XMLOrder:
    """
    Parse an <order> document.

    VULNERABILITY: XXE - DTDs are loaded and external entities resolved,
    including over the network.

    Raises:
        ValueError: the document is not well-formed or a field is not numeric.
            The message includes the offending (entity-expanded) text.
    """
    parser = etree.XMLParser(load_dtd=True, resolve_entities=True, no_network=False)
    try:
        root = etree.fromstring(document, parser=parser)
    except etree.XMLSyntaxError as e:
        raise ValueError(str(e)) from e

    values = {}
    for field in ORDER_FIELDS:
        node = root.find(field)
        if node is None:
            continue
        text = "".join(node.itertext()).strip()
        if not text:
            continue
        if field == "total_price":
            values[field] = float(text)
        else:
            values[field] = int(text)
    return XMLOrder(**values)


def orders_to_xml(rows: List[Row]) -> bytes:
    """Render result rows as <orders><order>...</order></orders>."""
    root = etree.Element("orders")
    for row in rows:
        order = etree.SubElement(root, "order")
        for column, value in row.items():
            child = etree.SubElement(order, column)
            if value is not None:
                child.text = str(value)
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8")
