from neowatch.models.neo import ApproachEvent as ApproachEvent, TrackedObject as TrackedObject
