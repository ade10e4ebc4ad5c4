"""Constants used throughout the bot."""

from decimal import Decimal
from enum import Enum


class SplitType(str, Enum):
    """How an expense is split."""
    EQUAL = "equal"            # Same share for everyone
    PERCENTAGE = "percentage"  # Share given as percent of the total
    EXACT = "exact"            # Share given as an amount


class PaymentStatus(str, Enum):
    """Payment lifecycle states."""
    PENDING = "pending"
    SENT = "sent"
    RECEIVED = "received"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class PaymentType(str, Enum):
    """Why a payment was made."""
    SETTLEMENT = "settlement"
    REQUEST = "request"
    DIRECT_PAYMENT = "direct_payment"


class PaymentMethod(str, Enum):
    """How money moved."""
    MOBILE_MONEY = "mobile_money"
    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"
    OTHER = "other"


class SettlementStrategy(str, Enum):
    """Matching policy used when simplifying debts."""
    SORTED = "sorted"  # Largest creditor against largest debtor
    NESTED = "nested"  # Every creditor scans every debtor in balance order


SUPPORTED_CURRENCIES = ("RWF", "USD", "EUR", "KES", "UGX", "TZS")
DEFAULT_CURRENCY = "RWF"

# Balances within this distance of zero are settled
SETTLEMENT_TOLERANCE = Decimal("0.01")
CENT = Decimal("0.01")

# Bot commands
CMD_START = "start"
CMD_HELP = "help"
CMD_NEW_GROUP = "new_group"
CMD_JOIN = "join"
CMD_GROUPS = "groups"
CMD_ADD_EXPENSE = "add_expense"
CMD_BALANCES = "balances"
CMD_SIMPLIFY = "simplify"
CMD_SETTLE = "settle"
CMD_LEAVE = "leave"
CMD_DELETE_GROUP = "delete_group"
CMD_EXPENSES = "expenses"
CMD_DELETE_EXPENSE = "delete_expense"
CMD_PAY = "pay"
CMD_REQUEST = "request"
CMD_CONFIRM = "confirm"
CMD_CANCEL = "cancel"

# Messages
MSG_WELCOME = """
👋 Hi! I keep track of shared expenses.

I can:
• Create groups and add members
• Record who paid for what
• Show everyone's balance
• Work out the fewest transfers to settle up

Use /help for the list of commands.
"""

MSG_HELP = """
📖 <b>Available commands:</b>

<b>Groups:</b>
/new_group &lt;name&gt; [currency] - create a group
/join &lt;group_id&gt; - join a group
/groups - your groups
/leave &lt;group_id&gt; - leave a group
/delete_group &lt;group_id&gt; - delete a group you created

<b>Expenses:</b>
/add_expense &lt;group_id&gt; &lt;amount&gt; &lt;description&gt; - split equally
/expenses &lt;group_id&gt; - list expenses
/delete_expense &lt;expense_id&gt; - delete an expense

<b>Balances:</b>
/balances &lt;group_id&gt; - net balance of every member
/simplify &lt;group_id&gt; - who pays whom
/settle &lt;group_id&gt; &lt;user_id&gt; &lt;amount&gt; - record a payment

<b>Payments:</b>
/pay &lt;group_id&gt; &lt;user_id&gt; &lt;amount&gt; - send a payment for confirmation
/request &lt;group_id&gt; &lt;user_id&gt; &lt;amount&gt; - ask a member to pay you
/confirm &lt;payment_id&gt; - confirm a payment you received
/cancel &lt;payment_id&gt; - cancel a pending payment
"""

# Error messages
ERR_NO_GROUP = "❌ Group not found"
ERR_NOT_MEMBER = "❌ You are not a member of this group"
ERR_INVALID_AMOUNT = "❌ Invalid amount. Use numbers, e.g. 100 or 150.50"
ERR_USAGE = "❌ Usage: {usage}"
ERR_CALCULATION = "❌ Failed to calculate balances"
ERR_NO_EXPENSE = "❌ Expense not found"
ERR_NO_PAYMENT = "❌ Payment not found"
ERR_NO_PERMISSION = "❌ You are not allowed to do this"
ERR_NOT_RECIPIENT = "❌ The recipient must be another member of the group"
