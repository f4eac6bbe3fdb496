from app.bootstrap.components import Components


def get_components(
        env: str = 'development',
        config_path: str = '.env'
) -> Components:
    return Components(env, config_path)
