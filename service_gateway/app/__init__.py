"""
API Gateway Service package for the HollyMarket Access Gateway.

The gateway sits between the browser frontend and Polymarket, enforcing:
- Authentication: email OTP sessions via the Supabase auth provider
- Uniform validation and error envelopes for every route
- Builder attribution signing without exposing the builder secret

Structure:
- app.main: GatewayService wiring, routers and lifecycle.
- app.adapters: HTTP clients for the auth provider and Polymarket APIs.
- app.domain: Authentication gate and query validation helpers.
- app.routes: Router factories, one per route group.
- app.models: Request, identity and query models.
"""
