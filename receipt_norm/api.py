"""
FastAPI endpoints for receipt normalization.
"""

import os
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

import logging

from receipt_norm.audit import audit_batch
from receipt_norm.normalizer import canonicalize, canonicalize_batch
from receipt_norm.payments import receipt_payload

logger = logging.getLogger(__name__)

# Maximum number of orders per batch request. Override with RECEIPT_API_MAX_BATCH.
MAX_BATCH_SIZE = int(os.getenv("RECEIPT_API_MAX_BATCH", "500"))

app = FastAPI(title="Receipt Normalizer API", version="1.0.0")

# Allow cross-origin requests so the POS and admin frontends can call this API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _check_batch(orders: List[Dict[str, Any]]):
    if len(orders) > MAX_BATCH_SIZE:
        raise HTTPException(
            status_code=413,
            detail=f"Batch of {len(orders)} orders exceeds maximum of {MAX_BATCH_SIZE}"
        )


@app.get("/health")
async def health() -> Dict[str, str]:
    """
    Health check endpoint.

    Returns:
        Dictionary with status "ok"
    """
    return {"status": "ok"}


@app.post("/canonicalize")
async def canonicalize_order(order: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize one raw order into a canonical receipt.
    """
    try:
        return canonicalize(order).to_dict()
    except Exception as e:
        logger.exception("Unexpected failure canonicalizing order")
        raise HTTPException(status_code=500, detail=f"Normalization error: {str(e)}")


@app.post("/canonicalize-batch")
async def canonicalize_orders(orders: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Normalize a list of raw orders, preserving order.
    """
    _check_batch(orders)
    try:
        return [receipt.to_dict() for receipt in canonicalize_batch(orders)]
    except Exception as e:
        logger.exception("Unexpected failure canonicalizing batch")
        raise HTTPException(status_code=500, detail=f"Normalization error: {str(e)}")


@app.post("/payload")
async def print_payload(order: Dict[str, Any]) -> Dict[str, Any]:
    """
    Canonical receipt plus payment-method split and VAT, for printing.
    """
    try:
        return receipt_payload(order)
    except Exception as e:
        logger.exception("Unexpected failure building print payload")
        raise HTTPException(status_code=500, detail=f"Payload error: {str(e)}")


@app.post("/audit")
async def audit_orders(orders: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Audit a batch of raw orders.

    Returns:
        Audit result from audit_batch, containing per_order results and summary.
    """
    _check_batch(orders)
    try:
        return audit_batch(orders)
    except Exception as e:
        logger.exception("Unexpected failure auditing orders")
        raise HTTPException(status_code=500, detail=f"Audit error: {str(e)}")
