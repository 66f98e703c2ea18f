"""
The six restaurant tools and their MCP registration.

Each tool is an async method on RestaurantTools that returns an MCP text
payload. Failures are rendered as "Error: ..." text with ``is_error`` set;
no tool raises to its caller.

Mutating tools (load, add, place) run under one asyncio.Lock. Listing and
viewing never await, so they cannot interleave with a mutation. Question
answering awaits the LLM outside the lock.
"""
import asyncio
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from claude_agent_sdk import create_sdk_mcp_server, tool

from logger_config import get_logger
from order_log import OrderLog
from order_validator import OrderIdGenerator, place_order
from restaurant_errors import DataNotLoaded, RestaurantError
from restaurant_loader import RestaurantDataSource
from restaurant_models import format_price
from restaurant_qa import AnswerGenerator, build_answer_prompt
from restaurant_state import SessionState

logger = get_logger()

SERVER_NAME = "restaurant"
SERVER_VERSION = "1.0.0"

LOAD_SUCCESS_TEXT = "Success: All restaurant data has been successfully loaded. The system is ready."
EMPTY_MENU_TEXT = "The menu is currently empty."
EMPTY_CART_TEXT = "Your cart is currently empty."

TOOL_NAMES = [
    "loadRestaurantData",
    "answerGeneralQuestion",
    "listMenuItems",
    "addItemToCart",
    "viewCart",
    "placeOrder",
]


def _tool_text(text: str, *, is_error: bool = False) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"content": [{"type": "text", "text": str(text)}]}
    if is_error:
        payload["is_error"] = True
    return payload


def _tool_error(error: RestaurantError) -> Dict[str, Any]:
    logger.warning(f"tool_error: kind={error.kind} message={error.message}")
    return _tool_text(f"Error: {error.message}", is_error=True)


def tool_result_text(result: Dict[str, Any]) -> str:
    """Pull the text back out of a tool payload."""
    content = result.get("content") or []
    return str(content[0].get("text") or "") if content else ""


_WHOLE_NUMBER = re.compile(r"\+?[0-9]+")


def _coerce_quantity(value: Any) -> Any:
    # Leave anything that is not clearly a whole number for SessionState to reject.
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _WHOLE_NUMBER.fullmatch(value.strip()):
        return int(value.strip())
    return value


@dataclass
class ToolUsageTracker:
    tool_call_counts: Dict[str, int] = field(default_factory=dict)

    def record_tool_invocation(self, tool_name: str) -> None:
        self.tool_call_counts[tool_name] = int(self.tool_call_counts.get(tool_name, 0)) + 1

    def render_report(self) -> str:
        total = sum(self.tool_call_counts.values())
        lines: List[str] = ["Tool call statistics", "", "| Tool | Calls | Share |", "| --- | ---: | ---: |"]
        items = sorted(self.tool_call_counts.items(), key=lambda kv: (-kv[1], kv[0]))
        for name, count in items:
            pct = (float(count) / float(total) * 100.0) if total else 0.0
            lines.append(f"| {name} | {count} | {pct:.1f}% |")
        lines.append(f"| **Total** | **{total}** | **{100.0 if total else 0.0:.1f}%** |")
        return "\n".join(lines)


class RestaurantTools:
    def __init__(
        self,
        state: SessionState,
        source: RestaurantDataSource,
        answer_generator: AnswerGenerator,
        order_log: Optional[OrderLog] = None,
        id_generator: Optional[OrderIdGenerator] = None,
        usage: Optional[ToolUsageTracker] = None,
    ) -> None:
        self.state = state
        self.source = source
        self.answer_generator = answer_generator
        self.order_log = order_log or OrderLog()
        self.id_generator = id_generator or OrderIdGenerator()
        self.usage = usage or ToolUsageTracker()
        self._lock = asyncio.Lock()

    def _record(self, name: str, args: Dict[str, Any]) -> None:
        logger.info(f"tool_call: {name} args={json.dumps(args, ensure_ascii=False, default=str)}")
        self.usage.record_tool_invocation(name)

    async def load_restaurant_data(self) -> Dict[str, Any]:
        self._record("loadRestaurantData", {})
        try:
            async with self._lock:
                data = await asyncio.to_thread(self.source.read)
                self.state.load(data.catalog_rows, data.schedule_rows, data.info_text)
        except RestaurantError as e:
            return _tool_error(e)
        except Exception as e:
            logger.error(f"[loadRestaurantData Error] {e}", exc_info=True)
            return _tool_text(f"Error: Failed to load restaurant data. Details: {e}", is_error=True)
        return _tool_text(LOAD_SUCCESS_TEXT)

    async def answer_general_question(self, question: str) -> Dict[str, Any]:
        self._record("answerGeneralQuestion", {"question": question})
        if not self.state.is_ready():
            return _tool_error(DataNotLoaded())
        prompt = build_answer_prompt(self.state.restaurant_info_text, question)
        try:
            answer = await self.answer_generator.generate(prompt)
        except Exception as e:
            logger.error(f"[answerGeneralQuestion Error] {e}", exc_info=True)
            return _tool_text(f"Error: Could not answer the question right now. Details: {e}", is_error=True)
        return _tool_text(answer)

    async def list_menu_items(self) -> Dict[str, Any]:
        self._record("listMenuItems", {})
        if not self.state.is_ready():
            return _tool_error(DataNotLoaded())
        items = self.state.list_items()
        if not items:
            return _tool_text(EMPTY_MENU_TEXT)
        menu = "\n".join(f"• {item.name} - {format_price(item.unit_price)}" for item in items)
        return _tool_text(f"Here is our menu:\n{menu}")

    async def add_item_to_cart(self, item_name: str, quantity: Any) -> Dict[str, Any]:
        self._record("addItemToCart", {"itemName": item_name, "quantity": quantity})
        qty = _coerce_quantity(quantity)
        try:
            async with self._lock:
                line = self.state.add_line(item_name, qty)
        except RestaurantError as e:
            return _tool_error(e)
        return _tool_text(f"Success: Added {qty} x {line.item_name} to your cart.")

    async def view_cart(self) -> Dict[str, Any]:
        self._record("viewCart", {})
        lines, total = self.state.view()
        if not lines:
            return _tool_text(EMPTY_CART_TEXT)
        summary = "\n".join(
            f"• {line.quantity} x {line.item_name} ({format_price(line.unit_price_snapshot)} each)" for line in lines
        )
        return _tool_text(f"Your current cart:\n{summary}\n\n**Total Price: {format_price(total)}**")

    async def place_order(self, delivery_date: str, delivery_time: str) -> Dict[str, Any]:
        self._record("placeOrder", {"deliveryDate": delivery_date, "deliveryTime": delivery_time})
        try:
            async with self._lock:
                order = place_order(self.state, delivery_date, delivery_time, self.id_generator)
        except RestaurantError as e:
            return _tool_error(e)
        try:
            self.order_log.append(order)
        except OSError as e:
            # The order is already committed in memory.
            logger.error(f"Failed to append order {order.order_id} to the order log: {e}", exc_info=True)
        return _tool_text(f"Success! Your order has been placed. Your order ID is {order.order_id}. Thank you!")


def build_mcp_server(tools: RestaurantTools) -> Dict[str, Any]:
    """Register the six tools on an in-process MCP server bound to ``tools``."""

    @tool(
        "loadRestaurantData",
        "Initializes the system by loading all necessary restaurant data (menu, schedule, and general info). "
        "This MUST be the first tool called in any new conversation.",
        {},
    )
    async def load_restaurant_data(_args: Dict[str, Any]) -> Dict[str, Any]:
        return await tools.load_restaurant_data()

    @tool(
        "answerGeneralQuestion",
        "Answers general questions about the restaurant, such as its story, hours, or policies. "
        "Use this for non-ordering queries.",
        {"question": str},
    )
    async def answer_general_question(args: Dict[str, Any]) -> Dict[str, Any]:
        return await tools.answer_general_question(str(args.get("question") or ""))

    @tool(
        "listMenuItems",
        "Displays a list of all available food and drink items from the menu, including their prices.",
        {},
    )
    async def list_menu_items(_args: Dict[str, Any]) -> Dict[str, Any]:
        return await tools.list_menu_items()

    @tool(
        "addItemToCart",
        "Adds a specified quantity of a menu item to the user's shopping cart. "
        "itemName must be the exact menu name; quantity must be a positive integer.",
        {"itemName": str, "quantity": int},
    )
    async def add_item_to_cart(args: Dict[str, Any]) -> Dict[str, Any]:
        return await tools.add_item_to_cart(str(args.get("itemName") or ""), args.get("quantity"))

    @tool(
        "viewCart",
        "Shows the current items in the shopping cart, their quantities, and the total price.",
        {},
    )
    async def view_cart(_args: Dict[str, Any]) -> Dict[str, Any]:
        return await tools.view_cart()

    @tool(
        "placeOrder",
        "Finalizes and submits the order. Requires a delivery date (YYYY-MM-DD) and a delivery time "
        "(HH:MM, 24-hour). This is the last step of the ordering process.",
        {"deliveryDate": str, "deliveryTime": str},
    )
    async def place_order_tool(args: Dict[str, Any]) -> Dict[str, Any]:
        return await tools.place_order(str(args.get("deliveryDate") or ""), str(args.get("deliveryTime") or ""))

    return create_sdk_mcp_server(
        name=SERVER_NAME,
        version=SERVER_VERSION,
        tools=[
            load_restaurant_data,
            answer_general_question,
            list_menu_items,
            add_item_to_cart,
            view_cart,
            place_order_tool,
        ],
    )


def allowed_tool_names(server_name: str = SERVER_NAME) -> List[str]:
    return [f"mcp__{server_name}__{name}" for name in TOOL_NAMES]
