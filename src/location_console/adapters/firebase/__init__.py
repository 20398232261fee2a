"""Firebase Realtime Database adapters."""

from location_console.adapters.firebase.firebase_datastore import FirebaseRealtimeDatastore

__all__ = ["FirebaseRealtimeDatastore"]
