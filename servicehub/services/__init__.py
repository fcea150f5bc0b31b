"""Request pricing, matching and lifecycle services"""
