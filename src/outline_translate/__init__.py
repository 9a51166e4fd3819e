"""Translate an Outline collection into another collection, keeping its tree."""

from outline_translate.api import OutlineApi
from outline_translate.core.ledger import TranslationLedger
from outline_translate.protocols import ApiProtocol, DocumentStoreProtocol, TranslatorProtocol
from outline_translate.store import OutlineDocumentStore
from outline_translate.translator import OpenAITranslator

__all__ = [
    "ApiProtocol",
    "DocumentStoreProtocol",
    "OpenAITranslator",
    "OutlineApi",
    "OutlineDocumentStore",
    "TranslationLedger",
    "TranslatorProtocol",
]
