"""Command-line interface package"""
