"""
Creditman signals - public event API.

Emitted after the ledger transaction of the operation has been committed:
- points_earned: sender=CreditPointsTransaction, transaction, customer_id, restaurant_id
- points_spent: sender=CreditPointsTransaction, transactions=list, customer_id, restaurant_id, points
- points_expired: sender=CreditPointsTransaction, transactions=list, customer_id, restaurant_id
"""

from django.dispatch import Signal

# Ledger signals (emitted by services)
points_earned = Signal()
points_spent = Signal()
points_expired = Signal()
