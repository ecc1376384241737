"""Auction core: bids, clearing, settlement, ledgers and configuration"""
