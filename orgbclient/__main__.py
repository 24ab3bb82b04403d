from orgbclient.cli import orgbcli

raise SystemExit(orgbcli())
