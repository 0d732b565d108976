def filter_logs(contract, event_name):
    return [e for e in contract.get_logs() if type(e).__name__ == event_name]
