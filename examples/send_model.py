import httpx

URL = "http://127.0.0.1:8000/validate"

model = {
    "nodes": [
        {"id": "0000", "name": "Have a party"},
        {"id": "0001", "name": "Buy food"},
        {"id": "0002", "name": "Book venue"},
        {"id": "0003", "name": "Pay deposit"},
        {"id": "0004", "name": "Host", "actor": True},
    ],
    "edges": [
        {"src": "0001", "dst": "0000", "type": "AND"},
        {"src": "0002", "dst": "0000", "type": "OR"},
        {"src": "0003", "dst": "0002", "type": "AND"},
        {"src": "0002", "dst": "0003", "type": "++"},
    ],
}

def main() -> None:
    r = httpx.post(URL, json=model, timeout=10)
    r.raise_for_status()
    reply = r.json()
    print("cycles:", reply["report"]["cycles"])
    for m in reply["messages"]:
        print(m["suggestion"])

if __name__ == "__main__":
    main()
