"""
Test Suite for Cargo Intake

Test Structure:
- unit/: Unit tests mirroring src/ package structure
- integration/: CLI commands and the end-to-end intake workflow

Test Categories:
- Core utilities (currency, money, rules, config)
- Packing list parsing
- Customer matching and duplicate grouping
- Pricing and manual adjustments
- Staging sessions and the shipment store

Test Data:
All customers, phones and packing lists are synthetic.
"""
