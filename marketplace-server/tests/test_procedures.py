"""
Named procedures: parameter mapping, principal checks and admin-only calls.
"""

from decimal import Decimal

import pytest

from estate_market.modules.common import ForbiddenError, ValidationError
from estate_market.modules.procedures import ProcedureNotFoundError, call_procedure, registered_procedures
from estate_market.modules.properties import PropertyService
from estate_market.modules.wallets import WalletService
from estate_market.modules.withdrawals import WithdrawalService

BANK = {"method": "bank", "accountName": "A", "accountNumber": "1", "bankName": "B"}


class TestRegistry:
    """All financial procedures are reachable by name"""

    def test_registered_names(self):
        assert registered_procedures() == [
            "approve_withdrawal",
            "list_property_in_marketplace",
            "process_wallet_deposit",
            "purchase_marketplace_listing",
            "reject_withdrawal",
            "request_withdrawal",
        ]

    async def test_unknown_procedure(self, session, settings, make_account):
        account = await make_account("Caller")
        with pytest.raises(ProcedureNotFoundError):
            await call_procedure(session, "drop_everything", {}, account, settings)


class TestProcedureCalls:
    """Procedures delegate to the services with the client's parameter names"""

    async def test_deposit(self, session, settings, make_account):
        account = await make_account("Depositor")

        result = await call_procedure(
            session, "process_wallet_deposit", {"p_user_id": account.id, "p_amount": 750}, account, settings
        )

        assert result["balance"] == Decimal("750.00")

    async def test_deposit_defaults_to_principal(self, session, settings, make_account):
        account = await make_account("Implicit")
        await call_procedure(session, "process_wallet_deposit", {"p_amount": "20"}, account, settings)
        assert await WalletService.with_session(session, settings).get_balance(account.id) == Decimal("20.00")

    async def test_missing_parameter(self, session, settings, make_account):
        account = await make_account("Forgetful")
        with pytest.raises(ValidationError):
            await call_procedure(session, "process_wallet_deposit", {}, account, settings)

    async def test_cannot_act_for_someone_else(self, session, settings, make_account):
        account = await make_account("Mallory")
        victim = await make_account("Victim", balance="1000")

        with pytest.raises(ForbiddenError):
            await call_procedure(
                session,
                "request_withdrawal",
                {"p_user_id": victim.id, "p_amount": 500, "p_payment_details": BANK},
                account,
                settings,
            )

    async def test_withdrawal_round_trip(self, session, settings, make_account):
        user = await make_account("Saver", balance="1000")
        admin = await make_account("Admin", role="admin")

        request_id = await call_procedure(
            session,
            "request_withdrawal",
            {"p_user_id": user.id, "p_amount": 600, "p_payment_details": BANK},
            user,
            settings,
        )
        with pytest.raises(ForbiddenError):
            await call_procedure(session, "approve_withdrawal", {"p_request_id": request_id}, user, settings)

        assert await call_procedure(session, "approve_withdrawal", {"p_request_id": request_id}, admin, settings) is True

        record = await WithdrawalService.with_session(session, settings).get_request(request_id)
        assert record.status == "approved"
        assert record.reviewed_by == admin.id
        assert await WalletService.with_session(session, settings).get_balance(user.id) == Decimal("400.00")

    async def test_list_and_purchase(self, session, settings, make_account, make_property):
        seller = await make_account("Seller", paid=True)
        buyer = await make_account("Buyer", paid=True, balance="3000")
        prop = await make_property(seller.id)

        listed = await call_procedure(
            session,
            "list_property_in_marketplace",
            {"p_user_id": seller.id, "p_property_id": prop.id, "p_price": 2000, "p_duration": 14},
            seller,
            settings,
        )
        assert listed is True

        transaction_id = await call_procedure(
            session,
            "purchase_marketplace_listing",
            {"p_buyer_id": buyer.id, "p_property_id": prop.id},
            buyer,
            settings,
        )

        assert isinstance(transaction_id, str)
        assert (await PropertyService.with_session(session).get_property(prop.id)).user_id == buyer.id
        assert await WalletService.with_session(session, settings).get_balance(seller.id) == Decimal("1000.00")
