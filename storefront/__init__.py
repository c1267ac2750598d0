"""Serveur de la boutique t-shirts: catalogue, tarification serveur et checkout Stripe."""
