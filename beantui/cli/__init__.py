"""Command-line interface for beantui.

Usage:
    beantui --file ledger.beancount
    beantui --file ledger.beancount --output edited.beancount
    cat ledger.beancount | beantui --file - > edited.beancount
"""
