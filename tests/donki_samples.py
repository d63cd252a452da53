"""Minimal DONKI-shaped payloads shared by the tests."""


def enlil(arrival=None, earth_gb=None, impacts=None, duration=None):
    payload = {
        "modelCompletionTime": "2024-03-01T02:00Z",
        "au": 2.0,
        "estimatedShockArrivalTime": arrival,
        "estimatedDuration": duration,
        "isEarthGB": earth_gb,
        "link": "https://example.invalid/enlil",
    }
    if impacts is not None:
        payload["impactList"] = [
            {"location": location, "arrivalTime": time, "isGlancingBlow": False}
            for location, time in impacts
        ]
    return payload


def analysis(most_accurate=False, note="", enlil_list=None, speed=500.0, half_angle=30.0, kind="S"):
    return {
        "time21_5": "2024-03-01T04:00Z",
        "latitude": 10.0,
        "longitude": -5.0,
        "halfAngle": half_angle,
        "speed": speed,
        "type": kind,
        "isMostAccurate": most_accurate,
        "note": note,
        "levelOfData": 0,
        "link": "https://example.invalid/analysis",
        "enlilList": enlil_list,
    }


def cme(activity_id, start_time="2024-03-01T00:00Z", analyses=None, linked=None, note=""):
    return {
        "activityID": activity_id,
        "startTime": start_time,
        "sourceLocation": "N10W05",
        "activeRegionNum": 13590,
        "note": note,
        "link": f"https://example.invalid/{activity_id}",
        "instruments": [{"displayName": "SOHO: LASCO/C2"}],
        "cmeAnalyses": analyses,
        "linkedEvents": [{"activityID": item} for item in linked] if linked is not None else None,
    }


def flare(flr_id, linked=None, begin="2024-03-01T00:00Z", class_type="M1.2"):
    return {
        "flrID": flr_id,
        "beginTime": begin,
        "peakTime": begin,
        "endTime": None,
        "classType": class_type,
        "sourceLocation": "N10W05",
        "activeRegionNum": 13590,
        "link": f"https://example.invalid/{flr_id}",
        "linkedEvents": [{"activityID": item} for item in linked] if linked is not None else None,
    }


def shock(ips_id, linked=None, event_time="2024-03-03T00:00Z"):
    return {
        "ipsID": ips_id,
        "eventTime": event_time,
        "locatioN": "Earth",
        "link": f"https://example.invalid/{ips_id}",
        "instruments": [{"displayName": "DSCOVR: PLASMAG"}],
        "linkedEvents": [{"activityID": item} for item in linked] if linked is not None else None,
    }


def storm(gst_id, start_time="2024-03-03T06:00Z", kp=(5.33, 6.0)):
    return {
        "gstID": gst_id,
        "startTime": start_time,
        "link": f"https://example.invalid/{gst_id}",
        "allKpIndex": [
            {"observedTime": start_time, "kpIndex": value, "source": "NOAA"} for value in kp
        ],
        "linkedEvents": None,
    }
