"""Tests for net balance calculation."""

from decimal import Decimal

from momo_split.schemas import ExpenseRecord, PaymentRecord, SplitRecord
from momo_split.utils.balances import balances_total, compute_balances


def expense(payer, amount, shares):
    return ExpenseRecord(
        payer_id=payer,
        amount=amount,
        splits=[SplitRecord(member_id=m, amount=a) for m, a in shares.items()]
    )


def payment(sender, recipient, amount, status="completed", group_id=None):
    return PaymentRecord(
        from_user_id=sender,
        to_user_id=recipient,
        amount=amount,
        status=status,
        group_id=group_id
    )


class TestComputeBalances:
    """Test suite for compute_balances."""

    def test_equal_split_three_members(self, members):
        """Payer is owed everything but their own share."""
        balances = compute_balances(
            members,
            [expense("A", 300, {"A": 100, "B": 100, "C": 100})]
        )

        assert balances == {"A": Decimal("200"), "B": Decimal("-100"), "C": Decimal("-100")}

    def test_completed_payment_moves_balances(self, members):
        """A completed payment reduces the sender's debt and the recipient's credit."""
        balances = compute_balances(
            members,
            [expense("A", 300, {"A": 100, "B": 100, "C": 100})],
            [payment("B", "A", 100)]
        )

        assert balances == {"A": Decimal("100"), "B": Decimal("0"), "C": Decimal("-100")}

    def test_only_completed_payments_count(self, members):
        """Pending, failed and cancelled payments are ignored."""
        balances = compute_balances(
            members,
            [expense("A", 300, {"A": 100, "B": 100, "C": 100})],
            [
                payment("B", "A", 100, status="pending"),
                payment("C", "A", 100, status="failed"),
                payment("C", "A", 50, status="cancelled"),
            ]
        )

        assert balances["A"] == Decimal("200")
        assert balances["B"] == Decimal("-100")

    def test_payments_of_other_groups_are_ignored(self, members):
        """Payments of this group and payments without a group are honored."""
        balances = compute_balances(
            members,
            [expense("A", 300, {"A": 100, "B": 100, "C": 100})],
            [
                payment("B", "A", 100, group_id=7),
                payment("C", "A", 40, group_id=None),
                payment("C", "A", 60, group_id=8),
            ],
            group_id=7
        )

        assert balances == {"A": Decimal("60"), "B": Decimal("0"), "C": Decimal("-60")}

    def test_inactive_member_still_listed(self):
        """Members without activity appear with a zero balance."""
        balances = compute_balances(
            ["A", "B", "Z"],
            [expense("A", 50, {"A": 25, "B": 25})]
        )

        assert list(balances) == ["A", "B", "Z"]
        assert balances["Z"] == Decimal("0")

    def test_unknown_member_gets_an_entry(self):
        """Ids outside the member list are tolerated, not rejected."""
        balances = compute_balances(
            ["A"],
            [expense("A", 90, {"A": 30, "X": 60})],
            [payment("Y", "A", 10)]
        )

        assert balances == {
            "A": Decimal("50"),
            "X": Decimal("-60"),
            "Y": Decimal("10"),
        }

    def test_rounding_happens_once_at_the_end(self):
        """Fractions accumulate at full precision before rounding."""
        third = Decimal(10) / 3
        expenses = [
            ExpenseRecord(
                payer_id="A",
                amount=10,
                splits=[
                    SplitRecord(member_id="A", amount=third),
                    SplitRecord(member_id="B", amount=third),
                    SplitRecord(member_id="C", amount=third),
                ]
            )
            for _ in range(3)
        ]

        balances = compute_balances(["A", "B", "C"], expenses)

        assert balances == {"A": Decimal("20.00"), "B": Decimal("-10.00"), "C": Decimal("-10.00")}

    def test_empty_history(self, members):
        """No records means everybody is at zero."""
        assert compute_balances(members, []) == {m: Decimal("0") for m in members}

    def test_balances_sum_to_zero(self):
        """Double-entry splits always net out."""
        balances = compute_balances(
            ["A", "B", "C", "D"],
            [
                expense("A", Decimal("100.00"), {"A": Decimal("33.34"), "B": Decimal("33.33"), "C": Decimal("33.33")}),
                expense("D", Decimal("47.50"), {"B": Decimal("20"), "D": Decimal("27.50")}),
                expense("C", Decimal("12.99"), {"A": Decimal("12.99")}),
            ],
            [payment("B", "D", Decimal("20"))]
        )

        assert abs(balances_total(balances)) <= Decimal("0.01")
