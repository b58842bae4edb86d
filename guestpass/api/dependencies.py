"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting the domain
service and the infrastructure adapters (created at startup and kept on
app.state) into routes.
"""

from fastapi import Depends, Request

from guestpass.adapters.challenge import ChallengeImageRenderer
from guestpass.domain.passwords import PasswordPolicy
from guestpass.domain.ports import ChallengeVerifier, CredentialStore, IdentityVerifier, Notifier
from guestpass.domain.registration import RegistrationConfig, RegistrationService


def get_store(request: Request) -> CredentialStore:
    """
    Get credential store from app state.

    The store is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.store


def get_identity_verifier(request: Request) -> IdentityVerifier:
    return request.app.state.identity_verifier


def get_challenge_verifier(request: Request) -> ChallengeVerifier:
    return request.app.state.challenge_verifier


def get_challenge_renderer(request: Request) -> ChallengeImageRenderer:
    return request.app.state.challenge_renderer


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_password_policy(request: Request) -> PasswordPolicy:
    return request.app.state.password_policy


def get_registration_config(request: Request) -> RegistrationConfig:
    return request.app.state.registration_config


def get_registration_service(
    store: CredentialStore = Depends(get_store),
    identity_verifier: IdentityVerifier = Depends(get_identity_verifier),
    challenge_verifier: ChallengeVerifier = Depends(get_challenge_verifier),
    notifier: Notifier = Depends(get_notifier),
    password_policy: PasswordPolicy = Depends(get_password_policy),
    config: RegistrationConfig = Depends(get_registration_config),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the store, verifiers, notifier and policy for the
    domain service. The service itself holds no state between requests.
    """
    return RegistrationService(
        store=store,
        identity_verifier=identity_verifier,
        challenge_verifier=challenge_verifier,
        notifier=notifier,
        password_policy=password_policy,
        config=config,
    )
