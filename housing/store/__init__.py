"""Relational store for houses and flats."""

from housing.store.listing import ListingStore, StoreTransaction

__all__ = ["ListingStore", "StoreTransaction"]
