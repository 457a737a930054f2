# scripts/demo_upload.py
"""
Upload demo - sends sample files in each supported format to a running server
"""
import json
import sys
import requests

API_URL = "http://localhost:8000/api/ingest"

SAMPLES = {
    "json_export": {
        "name": "Structured export (pre-classified)",
        "filename": "export.json",
        "content": json.dumps({"logs": [
            {"sourceIp": "203.0.113.7", "method": "GET", "url": "/search?q=union select 1",
             "statusCode": 200, "attackType": "SQLi", "impact": "Breach"},
            {"sourceIp": "198.51.100.4", "method": "GET", "url": "/", "statusCode": 200},
        ]}),
    },
    "csv_waf": {
        "name": "WAF export (CSV)",
        "filename": "waf.csv",
        "content": (
            "timestamp,client_ip,method,url,status,payload,user_agent\n"
            "2024-01-01T10:00:00Z,10.0.0.1,GET,/login,200,,Mozilla/5.0\n"
            "2024-01-01T10:00:05Z,10.0.0.2,POST,/comment,403,\"<script>alert(1)</script>\",curl/8.4\n"
            "2024-01-01T10:00:09Z,10.0.0.3,GET,/x?id=1' or '1'='1,200,,sqlmap/1.7\n"
        ),
    },
    "apache_access": {
        "name": "Apache access log (free text)",
        "filename": "access.log",
        "content": (
            '10.0.0.5 - - [10/Oct/2020:13:55:36 -0700] "GET /etc/passwd HTTP/1.1" 200 1234\n'
            '10.0.0.6 - - [10/Oct/2020:13:55:40 -0700] "GET /index.html HTTP/1.1" 200 512\n'
            '10.0.0.7 - - [10/Oct/2020:13:55:41 -0700] "GET /q?x=<script> HTTP/1.1" 403 0\n'
        ),
    },
}


def run_upload(sample_key: str):
    sample = SAMPLES[sample_key]

    print(f"\n{'='*60}")
    print(f"Sample: {sample['name']}")
    print(f"{'='*60}\n")

    response = requests.post(
        API_URL,
        files={"file": (sample["filename"], sample["content"].encode("utf-8"))},
        timeout=30
    )

    if response.status_code == 200:
        data = response.json()
        analysis = data["analysis"]
        print(f"Strategy: {data['strategy']}  records: {data['record_count']}")
        print(f"Score: {analysis['score']}  risk: {analysis['risk']}")
        print(f"Breaches: {analysis['stats']['breaches']}  attempts: {analysis['stats']['attempts']}")
        print(analysis["recommendation"])
        for rec in data["records"]:
            print(f"  {rec['sourceIp']:<16} {rec['method']:<6} {rec['statusCode']} {rec['attackType']:<5} {rec['impact']:<8} {rec['url']}")
    else:
        print(f"API error: {response.status_code}")
        print(response.text)


if __name__ == "__main__":
    try:
        if len(sys.argv) > 1:
            key = sys.argv[1]
            if key in SAMPLES:
                run_upload(key)
            else:
                print(f"Unknown sample: {key}")
                print(f"Available: {list(SAMPLES.keys())}")
        else:
            for key in SAMPLES:
                run_upload(key)
    except requests.exceptions.ConnectionError:
        print("Could not connect to API. Is the server running? (python scripts/run_server.py)")
