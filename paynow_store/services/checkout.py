"""
Checkout Orchestrator

Client-side driver of a checkout:
1. Validates the customer form for the chosen payment method
2. Starts the payment through the storefront API
3. Web payments: hands the browser over to the gateway's hosted page
4. Mobile money: polls the status endpoint until the payment resolves or
   the one minute budget runs out

The poll loop is a state machine advanced one tick at a time. Each tick
returns the next ScheduledAction (or None when there is nothing left to do)
and a PollScheduler runs those actions on a single asyncio task. Closing the
orchestrator cancels whatever is still scheduled.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Sequence
from urllib.parse import urlencode

import httpx

from ..models.cart import CartItem
from ..models.payment import PaymentMethod, PaymentStatus, TestScenario
from .payments import now_ms
from .scenarios import scenario_for_phone
from .store_client import StoreClient, StoreClientError

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 5.0
SUCCESS_REDIRECT_DELAY_SECONDS = 2.0
PAYMENT_TIMEOUT_SECONDS = 60

TIMEOUT_MESSAGE = "Payment timed out after 1 minute"
POLL_ERROR_MESSAGE = "Failed to check payment status"


class CheckoutState(str, Enum):
    """Where a checkout currently is"""
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    REDIRECT_PENDING = "redirect_pending"
    POLLING = "polling"
    RESOLVED_SUCCESS = "resolved_success"
    RESOLVED_FAILURE = "resolved_failure"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class CheckoutForm:
    """Customer details collected on the checkout page"""
    name: str
    email: str
    phone: str = ""


@dataclass(frozen=True)
class PollState:
    """What the poll loop needs to query a pending mobile payment"""
    poll_url: str
    start_time: int
    phone: Optional[str] = None
    scenario: Optional[TestScenario] = None


@dataclass(frozen=True)
class ScheduledAction:
    """Work to run after ``delay`` seconds"""
    delay: float
    run: Callable[[], Awaitable[Optional["ScheduledAction"]]]


def validate_form(form: CheckoutForm, payment_method: PaymentMethod) -> dict[str, str]:
    """
    Field-level validation errors for a checkout form.

    Name is always required. Phone is only required for mobile money.
    """
    errors: dict[str, str] = {}

    if not form.name.strip():
        errors["name"] = "Name is required"

    if payment_method.is_mobile and not form.phone.strip():
        errors["phone"] = "Phone number required for mobile payments"

    return errors


class Navigator:
    """
    Where the checkout sends the shopper once it is done.

    Records every location it is asked to visit. Front ends subclass it to
    actually move the browser.
    """

    def __init__(self, base_url: str = ""):
        self.base_url = base_url.rstrip("/")
        self.history: list[str] = []

    @property
    def location(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    def go(self, url: str) -> None:
        logger.info(f"Navigating to {url}")
        self.history.append(url)

    def redirect(self, url: str) -> None:
        """Leave the store for the gateway's hosted payment page"""
        self.go(url)

    def success(self) -> None:
        self.go(f"{self.base_url}/payment/success")

    def failure(self, message: str) -> None:
        self.go(f"{self.base_url}/payment/failed?{urlencode({'error': message})}")


class PollScheduler:
    """Runs a chain of ScheduledActions on one asyncio task"""

    def __init__(self, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, action: ScheduledAction) -> asyncio.Task:
        if self.running:
            raise RuntimeError("Poll loop already running")
        self._task = asyncio.create_task(self._run(action))
        return self._task

    async def _run(self, action: Optional[ScheduledAction]) -> None:
        while action is not None:
            if action.delay > 0:
                await self._sleep(action.delay)
            action = await action.run()

    def cancel(self) -> None:
        if self.running:
            logger.debug("Cancelling scheduled poll")
            self._task.cancel()

    async def wait(self) -> None:
        """Wait for the chain to finish or be cancelled"""
        if self._task is None:
            return
        (outcome,) = await asyncio.gather(self._task, return_exceptions=True)
        if isinstance(outcome, Exception):
            raise outcome


class CheckoutOrchestrator:
    """State machine behind the checkout page"""

    def __init__(
        self,
        client: StoreClient,
        navigator: Navigator,
        test_mode: bool = True,
        scheduler: Optional[PollScheduler] = None,
        clock: Callable[[], int] = now_ms,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        success_redirect_delay: float = SUCCESS_REDIRECT_DELAY_SECONDS,
        timeout_seconds: int = PAYMENT_TIMEOUT_SECONDS,
    ):
        self.client = client
        self.navigator = navigator
        self.test_mode = test_mode
        self.scheduler = scheduler or PollScheduler()
        self._clock = clock
        self.poll_interval = poll_interval
        self.success_redirect_delay = success_redirect_delay
        self.timeout_seconds = timeout_seconds

        self.state = CheckoutState.IDLE
        self.errors: dict[str, str] = {}
        self.error: Optional[str] = None
        self.payment_method: Optional[PaymentMethod] = None
        self.poll_state: Optional[PollState] = None
        self.instructions: Optional[str] = None
        self.status_message: Optional[str] = None
        self.countdown: Optional[int] = None
        self.reference: Optional[str] = None

    # ==================== Submission ====================

    async def submit(
        self,
        items: Sequence[CartItem],
        form: CheckoutForm,
        payment_method: PaymentMethod,
        scenario: Optional[TestScenario] = None,
    ) -> CheckoutState:
        """Validate the form and start the payment"""
        if self.state not in (CheckoutState.IDLE, CheckoutState.RESOLVED_FAILURE, CheckoutState.TIMED_OUT):
            raise RuntimeError(f"Checkout already in progress ({self.state.value})")

        self.state = CheckoutState.VALIDATING
        self.payment_method = payment_method
        self.error = None
        self.errors = validate_form(form, payment_method)
        if not items:
            self.errors["items"] = "Your cart is empty"
        if self.errors:
            self.state = CheckoutState.IDLE
            return self.state

        self.state = CheckoutState.SUBMITTING
        phone = form.phone.strip() if payment_method.is_mobile else None
        if not self.test_mode:
            scenario = None
        elif payment_method.is_mobile and scenario is None:
            scenario = scenario_for_phone(phone)

        try:
            result = await self.client.initiate_payment(
                items,
                email=form.email,
                payment_method=payment_method,
                phone=phone,
                scenario=scenario,
            )
        except StoreClientError as e:
            return self._fail(e.message)
        except httpx.HTTPError as e:
            logger.error(f"Payment initiation request failed: {e}")
            return self._fail("Payment initiation failed")
        except ValueError as e:
            logger.error(f"Unreadable payment initiation response: {e}")
            return self._fail("Payment initiation failed")

        if not result.success:
            return self._fail(result.error or "Payment initiation failed")

        self.reference = result.reference

        if payment_method is PaymentMethod.WEB:
            if not result.redirect_url:
                return self._fail("Payment gateway did not return a redirect URL")
            self.state = CheckoutState.REDIRECT_PENDING
            self.navigator.redirect(result.redirect_url)
            return self.state

        if not result.poll_url:
            return self._fail("Payment gateway did not return a poll URL")

        self.state = CheckoutState.POLLING
        self.instructions = result.instructions
        self.status_message = result.instructions
        self.countdown = self.timeout_seconds
        self.poll_state = PollState(
            poll_url=result.poll_url,
            start_time=self._clock(),
            phone=phone,
            scenario=scenario,
        )
        logger.info(f"Polling payment {self.reference} at {result.poll_url}")
        self.scheduler.start(ScheduledAction(0, self.tick))
        return self.state

    def _fail(self, message: str) -> CheckoutState:
        self.state = CheckoutState.RESOLVED_FAILURE
        self.error = message
        logger.warning(f"Checkout failed: {message}")
        if self.payment_method is PaymentMethod.WEB:
            self.navigator.failure(message)
        return self.state

    # ==================== Poll loop ====================

    def remaining_seconds(self) -> int:
        """Seconds left of the poll budget, may go negative"""
        if self.poll_state is None:
            return self.timeout_seconds
        elapsed = (self._clock() - self.poll_state.start_time) // 1000
        return self.timeout_seconds - elapsed

    async def tick(self) -> Optional[ScheduledAction]:
        """Query the payment once and decide what happens next"""
        if self.state is not CheckoutState.POLLING or self.poll_state is None:
            return None

        poll = self.poll_state
        try:
            response = await self.client.check_payment_status(
                poll.poll_url,
                phone=poll.phone,
                start_time=poll.start_time,
                scenario=poll.scenario,
            )
        except (StoreClientError, httpx.HTTPError, ValueError) as e:
            logger.error(f"Status check failed: {e}")
            self._fail(POLL_ERROR_MESSAGE)
            return None

        if response.status == PaymentStatus.PENDING.value:
            remaining = self.remaining_seconds()
            self.countdown = max(remaining, 0)
            self.status_message = response.message or self.instructions
            if remaining > 0:
                return ScheduledAction(self.poll_interval, self.tick)

            self.state = CheckoutState.TIMED_OUT
            self.error = TIMEOUT_MESSAGE
            logger.warning(f"Payment {self.reference} timed out")
            return None

        if response.status == PaymentStatus.PAID.value:
            self.state = CheckoutState.RESOLVED_SUCCESS
            self.status_message = "Payment successful!"
            logger.info(f"Payment {self.reference} completed")
            return ScheduledAction(self.success_redirect_delay, self._finish_success)

        self._fail(response.message or "Payment failed")
        return None

    async def _finish_success(self) -> None:
        self.navigator.success()
        return None

    # ==================== Lifecycle ====================

    async def wait(self) -> CheckoutState:
        """Wait until the poll loop has nothing left scheduled"""
        await self.scheduler.wait()
        return self.state

    async def close(self) -> None:
        """Tear down the checkout, cancelling any scheduled poll"""
        self.scheduler.cancel()
        await self.scheduler.wait()
