"""Send one prompt through the proxy pipeline from the command line."""
from __future__ import annotations
import argparse
import json
import logging
import sys

from classroom_proxy.common.config import ProxyConfig, load_config
from classroom_proxy.common.logging_setup import setup_logging
from classroom_proxy.common.schema import ProxyResponse
from classroom_proxy.serve.handler import RequestProxyHandler

LOGGER = logging.getLogger("classroom_proxy.local.run_prompt")

def run_prompt(config: ProxyConfig, prompt: str, system: str | None = None, model: str | None = None) -> ProxyResponse:
    """
    Run a prompt through the same handler the HTTP app uses.

    The access gate is bypassed by sending the configured token.
    """
    body = {"prompt": prompt, "system": system, "model": model}
    headers = {"x-app-token": config.app_token} if config.app_token else {}
    handler = RequestProxyHandler(config)
    return handler.handle("POST", headers, {k: v for k, v in body.items() if v is not None})

def main(argv: list[str] | None = None) -> int:
    setup_logging()
    ap = argparse.ArgumentParser(description="Send a prompt through the classroom proxy pipeline")
    ap.add_argument("--prompt", required=True, help="User prompt")
    ap.add_argument("--system", default=None, help="System instructions")
    ap.add_argument("--model", default=None, help="Model id")
    ap.add_argument("--cfg", default=None, help="YAML config path")
    args = ap.parse_args(argv)

    config = ProxyConfig.from_file(args.cfg) if args.cfg else load_config()
    resp = run_prompt(config, args.prompt, args.system, args.model)
    if resp.status != 200:
        LOGGER.error("Request failed (%s): %s", resp.status, json.dumps(resp.body))
        return 1
    print(resp.body["text"])
    return 0

if __name__ == "__main__":
    sys.exit(main())
