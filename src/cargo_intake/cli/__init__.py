"""
Command Line Interface Package

Command Structure:
- cargo-intake: Main entry point with utility commands (version, config)
- cargo-intake stage: Parse, match and review a pasted packing list; optionally commit
- cargo-intake price: Price breakdown for a shipment volume and discount
"""
