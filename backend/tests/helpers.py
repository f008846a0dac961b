SENHA = "Senha@123"


async def registrar(client, email: str, senha: str = SENHA):
    return await client.post(
        "/registro",
        json={"email": email, "password": senha, "confirm_password": senha},
    )


async def login(client, email: str, senha: str = SENHA):
    return await client.post("/login", json={"email": email, "password": senha})


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
