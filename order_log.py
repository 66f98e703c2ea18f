from pathlib import Path
from typing import List, Optional

from logger_config import get_logger
from restaurant_models import Order, format_price

logger = get_logger()


class OrderLog:
    """Append-only record of placed orders, one JSON document per line."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else None

    def append(self, order: Order) -> None:
        logger.info("--- New Order Received ---")
        logger.info(f"Order ID: {order.order_id}")
        logger.info(f"Total Price: {format_price(order.total_price)}")
        logger.info(f"Delivery: {order.delivery_date.isoformat()} at {order.delivery_time}")
        logger.info(f"Items: {[line.model_dump(mode='json') for line in order.lines]}")
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(order.model_dump_json() + "\n")

    def read_all(self) -> List[Order]:
        if self.path is None or not self.path.exists():
            return []
        with open(self.path, "r", encoding="utf-8") as f:
            return [Order.model_validate_json(line) for line in f if line.strip()]
