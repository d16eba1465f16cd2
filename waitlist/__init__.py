"""Waitlist referral contest: point rules, ranking and services."""
