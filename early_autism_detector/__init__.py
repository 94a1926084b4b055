"""Early Autism Detector backend service."""
