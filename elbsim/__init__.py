"""In-memory Elastic Load Balancing query API simulator.

Designed to be dependency-free (standard library only) so client code can be
exercised against realistic request/response cycles without a live service.
"""
