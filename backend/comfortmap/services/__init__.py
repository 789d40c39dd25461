# Services package init
"""
ComfortMap Backend — Services Layer
=====================================

Service Inventory:
    - review_text: Encoder/decoder for the canonical review string
    - ReviewService: Create/list reviews against the store
    - Geocoder: Location text → coordinates (Nominatim)
    - ReviewBoard: Presentation client (cards, markers, submit flow)
"""
