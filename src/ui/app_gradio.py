"""Gradio web interface for review response generation"""
from __future__ import annotations

import asyncio
import time

import gradio as gr

from config import logger
from src.container import Container, build_container
from src.core import AppError, BUSINESS_TYPES, TONES
from src.lifecycle import extract_bearer


async def generate_ui(
    container: Container,
    authorization: str,
    review_text: str,
    business_type: str,
    tone: str,
) -> dict:
    """
    Gradio handler for generation requests

    Args:
        container: Wired services
        authorization: Bearer token, with or without the 'Bearer ' prefix
        review_text: Customer review from UI
        business_type: Selected business type
        tone: Selected tone

    Returns:
        Dictionary containing either:
            - record_id, responses and sentiment on success
            - Error dictionary with 'error' key and 'status' on failure
    """
    logger.info("Received generation request")
    token = authorization.strip() if authorization else ""
    if " " in token:
        token = extract_bearer(token) or ""

    try:
        receipt = await container.lifecycle.handle(
            token=token or None,
            review_text=review_text,
            business_type=business_type,
            tone=tone,
        )
    except AppError as e:
        logger.warning(f"AppError: {e}")
        return {**e.to_dict(), "status": e.status_code}

    return {
        "record_id": receipt.record_id,
        "responses": [candidate.model_dump() for candidate in receipt.result.candidates],
        "sentiment": receipt.result.sentiment.model_dump(),
        "usage": {"monthly_usage": receipt.monthly_usage, "usage_limit": receipt.usage_limit},
    }


def create_demo(container: Container) -> gr.Interface:
    async def _handler(authorization: str, review_text: str, business_type: str, tone: str) -> dict:
        return await generate_ui(container, authorization, review_text, business_type, tone)

    return gr.Interface(
        fn=_handler,
        inputs=[
            gr.Textbox(label="Access token", type="password"),
            gr.Textbox(label="Customer review", lines=4),
            gr.Dropdown(choices=list(BUSINESS_TYPES), value="restaurant", label="Business type"),
            gr.Dropdown(choices=list(TONES), value="professional", label="Tone"),
        ],
        outputs=gr.JSON(label="Generated responses"),
        title="ReviewBot Pro",
        description="Paste a customer review to get three response drafts in your chosen tone",
    )


if __name__ == "__main__":
    container = build_container()
    account = container.storage.create_account(
        email="demo@reviewbot.local",
        business_name="Demo Business",
        business_type="restaurant",
    )
    token = container.credentials.issue(account.id)
    logger.info(f"Demo account ready, access token: {token}")

    demo = create_demo(container)
    demo.launch(prevent_thread_lock=True)
    try:
        while True:
            time.sleep(0.1)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        # must run before demo.close(): pending usage increments live on the server loop
        asyncio.run(container.aclose())
        demo.close()
