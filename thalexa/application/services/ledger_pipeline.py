"""
Ledger operation pipeline.

Runs product registration, product verification and payments as
single-shot asynchronous operations:

    (rejected) ----------------------------> failed
    submit -> pending -> settled | failed

Validation and authorization are checked before anything is submitted.
Ledger failures become the terminal state of the pending operation.
Nothing is retried or deduplicated here; a retry is a new call.
"""

import logging
import secrets
from typing import Any, Callable, Dict, List, Optional

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from thalexa.application.services.notification_service import NotificationService
from thalexa.core.exceptions import ProviderError, ThalexaException, Unauthorized, ValidationError
from thalexa.core.interfaces.ledger import ILedgerClient
from thalexa.domain.entities.notification import NotificationType
from thalexa.domain.entities.product import Product, ProductDraft, parse_amount
from thalexa.domain.value_objects.operation import (
    LedgerOperation,
    OperationKind,
    VerificationRecord,
)
from thalexa.presentation.state.store import AppStore, NoticeLevel, StateSection

log = logging.getLogger("ThalexaLogger")

OperationCallback = Callable[[LedgerOperation], None]
Settler = Callable[[LedgerOperation, Any], Any]


class LedgerPipeline(QObject):
    """
    Asynchronous ledger operations with notification emission.

    Example:
        pipeline = LedgerPipeline(store, notifications, ledger)
        op = pipeline.register_product(ProductDraft("Widget", "A widget"))
        pipeline.operation_settled.connect(lambda op: print(op.result))
    """

    operation_started = pyqtSignal(object)  # LedgerOperation
    operation_settled = pyqtSignal(object)
    operation_failed = pyqtSignal(object)

    def __init__(
        self,
        store: AppStore,
        notifications: NotificationService,
        ledger: ILedgerClient,
        verify_base_url: str = "",
        timeout_ms: int = 0,
        parent: Optional[QObject] = None,
    ):
        """
        Initialize pipeline.

        Args:
            store: Application store
            notifications: Notification queue
            ledger: Ledger client that resolves the operations
            verify_base_url: Prefix of public verification links
            timeout_ms: Fail pending operations after this long (0 = never)
            parent: Optional parent QObject
        """
        super().__init__(parent)
        self._store = store
        self._notifications = notifications
        self._ledger = ledger
        self._verify_base_url = verify_base_url.rstrip("/")
        self._timeout_ms = timeout_ms
        self._pending: Dict[int, LedgerOperation] = {}

    def pending_operations(self) -> List[LedgerOperation]:
        return list(self._pending.values())

    # ----------------------------------------------------------------
    # Operations
    # ----------------------------------------------------------------

    def register_product(
        self, draft: ProductDraft, callback: Optional[OperationCallback] = None
    ) -> LedgerOperation:
        """
        Register a product owned by the connected wallet.

        Args:
            draft: Product input (name and description required)
            callback: Called once on the terminal state

        Returns:
            Operation handle (already failed on Unauthorized/ValidationError)
        """
        kind = OperationKind.REGISTER
        state = self._store.state
        if not state.is_authenticated:
            return self._reject(kind, Unauthorized(), draft.to_dict(), callback)
        try:
            draft = draft.validate()
        except ValidationError as e:
            return self._reject(kind, e, draft.to_dict(), callback)

        product_id = self._new_product_id()
        owner = state.wallet.address
        verify_url = f"{self._verify_base_url}/{product_id}" if self._verify_base_url else ""
        record = Product.from_draft(product_id, draft, owner, ledger_ref="", verify_url=verify_url)

        def settle(op: LedgerOperation, result: Dict[str, Any]) -> Product:
            product = Product.from_draft(
                product_id,
                draft,
                owner,
                ledger_ref=str(result["ledger_ref"]),
                verify_url=verify_url,
                created_at=record.created_at,
            )
            self._store.state.products.append(product)
            self._notifications.add(
                NotificationType.REGISTERED,
                "Product Registered",
                f"{product.name} registered as {product.id}",
            )
            self._store.commit(StateSection.PRODUCTS, StateSection.NOTIFICATIONS)
            self._store.post_notice(NoticeLevel.SUCCESS, "Product registered successfully!")
            return product

        self._store.post_notice(NoticeLevel.INFO, "Registering product on the ledger...")
        return self._start(
            kind, draft.to_dict(), {"product": record.to_dict()}, settle, callback
        )

    def verify_product(
        self, product_id: str, callback: Optional[OperationCallback] = None
    ) -> LedgerOperation:
        """
        Look a product up on the ledger.

        An unknown id settles normally with found=False.

        Args:
            product_id: Product id to verify
            callback: Called once on the terminal state
        """
        kind = OperationKind.VERIFY
        product_id = (product_id or "").strip()
        if not product_id:
            error = ValidationError("product_id", "please enter a product ID")
            return self._reject(kind, error, {"product_id": product_id}, callback)

        def settle(op: LedgerOperation, result: Dict[str, Any]) -> VerificationRecord:
            found = bool(result.get("found"))
            record = VerificationRecord(
                product_id=product_id,
                found=found,
                product=result.get("product") if found else None,
            )
            if found:
                title, message = "Product Verified", f"{product_id} is registered on the ledger"
            else:
                title, message = "Product Not Found", f"{product_id} is not registered on the ledger"
            self._notifications.add(NotificationType.VERIFIED, title, message)
            self._store.commit(StateSection.NOTIFICATIONS)
            level = NoticeLevel.SUCCESS if record.verified else NoticeLevel.WARNING
            self._store.post_notice(level, message)
            return record

        self._store.post_notice(NoticeLevel.INFO, "Verifying product...")
        payload = {"product_id": product_id}
        return self._start(kind, payload, payload, settle, callback)

    def send_payment(
        self,
        recipient: str,
        amount: Any,
        token: str = "SUI",
        callback: Optional[OperationCallback] = None,
    ) -> LedgerOperation:
        """
        Transfer tokens from the connected wallet.

        Balances are not touched here; the background refresher reads them
        back from the ledger.

        Args:
            recipient: Recipient address
            amount: Positive amount
            token: Token symbol
            callback: Called once on the terminal state
        """
        kind = OperationKind.SEND
        raw_input = {"recipient": recipient, "amount": str(amount), "token": token}
        state = self._store.state
        if not state.is_authenticated:
            return self._reject(kind, Unauthorized(), raw_input, callback)

        recipient = (recipient or "").strip()
        token = (token or "").strip().upper()
        try:
            if not recipient:
                raise ValidationError("recipient", "please enter a recipient address")
            value = parse_amount("amount", amount)
            if not token:
                raise ValidationError("token", "please choose a token")
        except ValidationError as e:
            return self._reject(kind, e, raw_input, callback)

        payload = {
            "sender": state.wallet.address,
            "recipient": recipient,
            "amount": str(value),
            "token": token,
        }

        def settle(op: LedgerOperation, result: Dict[str, Any]) -> Dict[str, Any]:
            self._notifications.add(
                NotificationType.PAYMENT_SENT,
                "Payment Sent",
                f"Sent {value} {token} to {recipient[:12]}...",
            )
            self._store.commit(StateSection.NOTIFICATIONS)
            self._store.post_notice(NoticeLevel.SUCCESS, f"Sent {value} {token} successfully!")
            return {**payload, "digest": result.get("digest", "")}

        self._store.post_notice(NoticeLevel.INFO, "Sending payment...")
        return self._start(kind, payload, payload, settle, callback)

    # ----------------------------------------------------------------
    # State machine
    # ----------------------------------------------------------------

    def _new_product_id(self) -> str:
        known = set(self._store.state.product_ids()) | {
            op.input.get("id") for op in self._pending.values()
        }
        while True:
            product_id = "prod_" + secrets.token_hex(5)[:9]
            if product_id not in known:
                return product_id

    def _reject(
        self,
        kind: OperationKind,
        error: ThalexaException,
        input: Dict[str, Any],
        callback: Optional[OperationCallback],
    ) -> LedgerOperation:
        op = LedgerOperation.rejected(kind, error, input)
        level = NoticeLevel.WARNING if isinstance(error, Unauthorized) else NoticeLevel.ERROR
        self._store.post_notice(level, error.message)
        self.operation_failed.emit(op)
        if callback:
            callback(op)
        return op

    def _start(
        self,
        kind: OperationKind,
        input: Dict[str, Any],
        payload: Dict[str, Any],
        settle: Settler,
        callback: Optional[OperationCallback],
    ) -> LedgerOperation:
        op = LedgerOperation(kind=kind, input=dict(input))
        if kind is OperationKind.REGISTER:
            op.input["id"] = payload["product"]["id"]
        self._pending[op.id] = op
        log.info(f"{op!r} pending")
        self.operation_started.emit(op)

        def on_complete(result: Optional[Any], error: Optional[Exception]) -> None:
            if op.state.is_terminal:
                log.warning(f"{op!r}: late ledger reply ignored")
                return
            if error is not None:
                self._finish_failed(op, error, callback)
                return
            try:
                value = settle(op, result or {})
            except (KeyError, TypeError, ValueError) as e:
                self._finish_failed(op, ProviderError("ledger", f"malformed reply ({e})"), callback)
                return
            self._pending.pop(op.id, None)
            op.settle(value)
            log.info(f"{op!r} settled")
            self.operation_settled.emit(op)
            if callback:
                callback(op)

        if self._timeout_ms:
            QTimer.singleShot(
                self._timeout_ms,
                lambda: self._finish_failed(
                    op, ProviderError("ledger", f"no reply after {self._timeout_ms}ms"), callback
                ),
            )

        try:
            self._ledger.submit(kind, payload, on_complete)
        except Exception as e:
            self._finish_failed(op, e, callback)
        return op

    def _finish_failed(
        self,
        op: LedgerOperation,
        error: Exception,
        callback: Optional[OperationCallback],
    ) -> None:
        if not isinstance(error, ThalexaException):
            error = ProviderError("ledger", str(error))
        if not op.fail(error):
            return
        self._pending.pop(op.id, None)
        log.error(f"{op!r} failed: {error}")

        self._notifications.add(
            NotificationType.OPERATION_FAILED,
            f"{op.kind.value.capitalize()} Failed",
            str(error),
        )
        self._store.commit(StateSection.NOTIFICATIONS)
        self._store.post_notice(NoticeLevel.ERROR, f"{op.kind.value.capitalize()} failed: {error}")
        self.operation_failed.emit(op)
        if callback:
            callback(op)
