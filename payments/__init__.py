"""
Payments app.

Wraps the iPaymu payment gateway (``payments.ipaymu``) and handles its
asynchronous payment callbacks (``payments.services``).  The app owns
no tables; payment state lives on the registration.
"""
