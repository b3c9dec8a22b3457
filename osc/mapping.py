# OSC address mapping
# Modify these to match the address schema of whatever receives the face record.
#
# Format: field → OSC address
OSC_ADDRESSES = {
    # Strings (sent on change)
    "gender":        "/face/gender",          # string: male/female/none
    "emotion":       "/face/emotion",         # string: happy/sad/... or none

    # Numbers (sent on change)
    "detected":      "/face/detected",        # int 1 = face, 0 = no face
    "confidence":    "/face/confidence",      # int 0–100
    "face_score":    "/face/quality",         # int 0–100
    "age":           "/face/age",             # float, -1.0 = unknown
    "gender_score":  "/face/gender/score",    # int 0–100, -1 = unknown
    "emotion_score": "/face/emotion/score",   # int 0–100, -1 = unknown
    "distance":      "/face/distance",        # int cm, -1 = unknown
    "real":          "/face/real",            # int 0–100, -1 = unknown
    "roll":          "/face/rotation/roll",   # float degrees, -1000.0 = unknown
    "yaw":           "/face/rotation/yaw",
    "pitch":         "/face/rotation/pitch",
}

# Sent in place of missing values so receivers can tell "unknown" from 0
MISSING_NUMBER = -1
MISSING_ANGLE  = -1000.0
MISSING_STRING = "none"
