"""
Browser automation for the retail site: Playwright session provisioning,
navigation steps, live/snapshot markup sources, cart actions and the
RetailClient that runs each domain operation.
"""
