# GoGoTime - API Routers
