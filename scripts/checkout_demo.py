#!/usr/bin/env python3
"""
Checkout walkthrough against a running storefront.

Fills a cart through the API and runs the checkout state machine for it,
printing the countdown while a mobile money payment is pending.

    python scripts/checkout_demo.py --method ecocash --phone 0771111111
    python scripts/checkout_demo.py --method ecocash --scenario insufficient
    python scripts/checkout_demo.py --method web
"""

import argparse
import asyncio
import logging
import sys

from paynow_store.core.config import settings
from paynow_store.models.cart import CartItem
from paynow_store.models.payment import PaymentMethod, TestScenario
from paynow_store.services.checkout import (
    CheckoutForm,
    CheckoutOrchestrator,
    CheckoutState,
    Navigator,
    PollScheduler,
)
from paynow_store.services.store_client import StoreClient, StoreClientError


def parse_args():
    parser = argparse.ArgumentParser(description="Run a checkout against the storefront")
    parser.add_argument("--base-url", default=settings.store_base_url)
    parser.add_argument("--method", choices=[m.value for m in PaymentMethod], default="ecocash")
    parser.add_argument("--name", default="Test Shopper")
    parser.add_argument("--email", default=settings.paynow_merchant_email)
    parser.add_argument("--phone", default="")
    parser.add_argument("--scenario", choices=[s.value for s in TestScenario])
    parser.add_argument("--product", action="append", default=[], help="Product ID (repeatable)")
    return parser.parse_args()


async def run(args) -> int:
    async with StoreClient(args.base_url) as client:
        cart = (await client.create_cart())["cart"]
        product_ids = args.product or [p["id"] for p in (await client.list_products())["products"][:2]]
        for product_id in product_ids:
            cart = (await client.add_to_cart(cart["cart_id"], product_id))["cart"]
        items = [CartItem.model_validate(item) for item in cart["items"]]
        print(f"Cart {cart['cart_id']}: {len(items)} item(s), total ${cart['total']:.2f}")

        orchestrator = CheckoutOrchestrator(
            client,
            Navigator(args.base_url),
            test_mode=not settings.is_production,
            scheduler=PollScheduler(),
        )
        form = CheckoutForm(name=args.name, email=args.email, phone=args.phone)
        scenario = TestScenario(args.scenario) if args.scenario else None

        state = await orchestrator.submit(items, form, PaymentMethod(args.method), scenario)
        if orchestrator.errors:
            for field, message in orchestrator.errors.items():
                print(f"  {field}: {message}")
            return 1

        if state is CheckoutState.POLLING:
            print(orchestrator.instructions or "Check your phone to authorise the payment")
            while orchestrator.scheduler.running:
                await asyncio.sleep(1)
                if orchestrator.state is CheckoutState.POLLING:
                    print(f"  {orchestrator.status_message or 'Waiting...'} ({orchestrator.countdown}s left)")
            state = await orchestrator.wait()

        print(f"Final state: {state.value}")
        if orchestrator.error:
            print(f"Error: {orchestrator.error}")
        if orchestrator.navigator.location:
            print(f"Next page: {orchestrator.navigator.location}")
        return 0 if state in (CheckoutState.RESOLVED_SUCCESS, CheckoutState.REDIRECT_PENDING) else 1


def main():
    logging.basicConfig(level=logging.WARNING)
    args = parse_args()
    try:
        sys.exit(asyncio.run(run(args)))
    except StoreClientError as e:
        print(f"✗ Storefront error: {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
