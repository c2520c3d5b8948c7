from dungeon_game import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Serve the Socket.IO transport and the static client on one port
    socketio.run(app, host=app.config['HOST'], port=app.config['PORT'], debug=app.config['DEBUG'])
